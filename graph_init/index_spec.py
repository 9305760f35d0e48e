"""Index specification parsing and planning.

The index specification is JSON of the form::

    {
      "indexes": [
        {
          "type": "NOTUNIQUE" | "FULLTEXT" | ...,
          "keys": [
            {
              "name": propertyName,
              "class": "String" | "Character" | "Boolean" | "Byte" | "Short" |
                       "Integer" | "Long" | "Float" | "Double" | "Decimal" |
                       "Precision" | "Geoshape",
              "cardinality": "SINGLE" | "LIST" | "SET"
            }
          ]
        }
      ]
    }

``class`` defaults to String; a missing cardinality is left undeclared.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from graph_init.dialects.base import INDEX_TYPES, IndexDialect
from graph_init.exceptions import SchemaError
from graph_init.properties import IndexNamer, PropertyKey, PropertyRegistry

logger = logging.getLogger(__name__)

DEFAULT_SPEC_FILE = "stucco_indexing.json"

PROPERTY_CLASSES = frozenset(
    {
        "String",
        "Character",
        "Boolean",
        "Byte",
        "Short",
        "Integer",
        "Long",
        "Float",
        "Double",
        "Decimal",
        "Precision",
        "Geoshape",
    }
)

CARDINALITIES = frozenset({"SINGLE", "LIST", "SET"})


class IndexKeySpec(BaseModel):
    """One property key of an index."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    class_name: str = Field(default="String", alias="class")
    cardinality: str = ""

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("key name must not be blank")
        return value

    @field_validator("class_name", mode="before")
    @classmethod
    def _capitalize_class(cls, value):
        if value is None:
            return "String"
        value = str(value).strip()
        if not value:
            return "String"
        value = value[0].upper() + value[1:].lower()
        if value not in PROPERTY_CLASSES:
            raise ValueError(f"unsupported property class '{value}'")
        return value

    @field_validator("cardinality", mode="before")
    @classmethod
    def _upper_cardinality(cls, value):
        if value is None:
            return ""
        value = str(value).strip().upper()
        if value and value not in CARDINALITIES:
            raise ValueError(f"unsupported cardinality '{value}'")
        return value

    def to_property_key(self) -> PropertyKey:
        return PropertyKey(self.name, self.class_name, self.cardinality)


class IndexDefinition(BaseModel):
    """One entry of the ``indexes`` array."""

    type: str
    keys: list[IndexKeySpec]

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, value):
        value = str(value).strip().upper()
        if value not in INDEX_TYPES:
            raise ValueError(f"unsupported index type '{value}'")
        return value


class IndexSpecification(BaseModel):
    """The whole index specification file."""

    indexes: list[IndexDefinition]


def parse_index_spec(data: dict) -> IndexSpecification:
    """Validate a decoded index specification.

    Raises:
        SchemaError: If the document does not follow the index grammar.
    """
    if not isinstance(data, dict) or not isinstance(data.get("indexes"), list):
        logger.error("Expected 'indexes' key")
        raise SchemaError("Index specification must contain an 'indexes' array")

    try:
        return IndexSpecification.model_validate(data)
    except ValidationError as e:
        raise SchemaError(f"Invalid index specification: {e}") from e


def load_index_spec(path: str | Path) -> IndexSpecification:
    """Load and validate an index specification file.

    Raises:
        OSError: If the file cannot be read.
        SchemaError: If the file is not valid JSON or not a valid spec.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"{path} is not valid JSON: {e}") from e
    return parse_index_spec(data)


def plan_indexes(spec: IndexSpecification, dialect: IndexDialect) -> list[str]:
    """Build the statements declaring every index and the properties it uses.

    Properties are declared once, before the first index that needs them.

    Raises:
        InconsistentPropertyError: If two entries declare the same property
            with different class or cardinality.
    """
    registry = PropertyRegistry()
    namer = IndexNamer()
    statements: list[str] = []

    for index in spec.indexes:
        keys = []
        for key_spec in index.keys:
            key = registry.record(key_spec.to_property_key())
            if key not in keys:
                keys.append(key)
        if not keys:
            logger.warning(f"Skipping {index.type} index with no keys")
            continue

        new_keys = [key for key in keys if not key.declared]

        statements.extend(dialect.index_statements(index.type, keys, new_keys, namer))
        for key in new_keys:
            key.declared = True

    logger.info(
        f"Planned {len(statements)} {dialect.name} statements "
        f"for {len(spec.indexes)} indexes and {len(registry)} properties"
    )
    return statements
