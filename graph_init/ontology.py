"""Ontology schema to Gremlin management scripts.

The ontology is a JSON Schema document whose ``definitions`` hold the base
``vertex`` and ``edge`` types plus one entry per concrete vertex/edge type::

    "Host": {
      "title": "Host",
      "allOf": [
        {"$ref": "#/definitions/vertex"},
        {
          "properties": {"hostname": {"type": "string"}},
          "indexes": {"composite": [{"keys": ["hostname"], "unique": true}]}
        }
      ]
    }

Key order inside ``definitions`` is not meaningful, and entries refer to the
base definitions, so the document is walked in passes: property types are
recorded first, then labels and indexes are declared, then any property that
no index used.
"""

import json
import logging
from pathlib import Path

from graph_init.dialects.gremlin import GremlinDialect
from graph_init.exceptions import SchemaError
from graph_init.properties import IndexNamer, PropertyKey, PropertyRegistry

logger = logging.getLogger(__name__)

DEFAULT_ONTOLOGY_FILE = "../ontology/stucco_schema.json"

VERTEX_REF = "#/definitions/vertex"
EDGE_REF = "#/definitions/edge"

DEFAULT_TYPE = "object"
DEFAULT_CARDINALITY = "single"

# JSON Schema (v4) types to the property classes of the management API
TYPE_MAP = {
    "array": "List",
    "boolean": "Boolean",
    "integer": "Long",
    "number": "Double",
    "object": "Object",
    "string": "String",
}


def _as_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


class OntologyPlanner:
    """Walks an ontology schema and builds the Gremlin scripts for it."""

    def __init__(self, dialect: GremlinDialect | None = None):
        self.dialect = dialect or GremlinDialect()
        self.properties = PropertyRegistry()
        self._namer = IndexNamer()
        self._statements: list[str] = []

    def plan(self, root: dict) -> list[str]:
        """Build the scripts for a decoded ontology document.

        Raises:
            SchemaError: If the document is malformed, an index refers to an
                unknown property, or a property is declared inconsistently.
        """
        definitions = root.get("definitions") if isinstance(root, dict) else None
        if not isinstance(definitions, dict):
            raise SchemaError("Ontology schema must contain a 'definitions' object")

        items = [item for item in definitions.values() if isinstance(item, dict)]

        for item in items:
            self._record_properties_owned_by(item)
            for owner in self._all_of(item):
                self._record_properties_owned_by(owner)

        # Labels and indexes, plus the properties the indexes need
        for item in items:
            if "allOf" in item:
                self._process_all_of(item)

        for key in self.properties.pending():
            self._emit(self.dialect.property_declaration(key))
            key.declared = True

        logger.info(
            f"Planned {len(self._statements)} Gremlin requests "
            f"for {len(items)} definitions and {len(self.properties)} properties"
        )
        return self._statements

    def _emit(self, statement: str) -> None:
        self._statements.append(statement)

    @staticmethod
    def _all_of(item: dict) -> list[dict]:
        all_of = item.get("allOf")
        if not isinstance(all_of, list):
            return []
        return [owner for owner in all_of if isinstance(owner, dict)]

    def _record_properties_owned_by(self, owner: dict) -> None:
        property_map = owner.get("properties")
        if not isinstance(property_map, dict):
            return

        for name, metadata in property_map.items():
            if not isinstance(metadata, dict):
                metadata = {}
            json_type = _as_text(metadata.get("type")) or DEFAULT_TYPE
            cardinality = _as_text(metadata.get("cardinality")) or DEFAULT_CARDINALITY

            data_type = TYPE_MAP.get(json_type)
            if data_type is None:
                raise SchemaError(f"Property '{name}' has unsupported type '{json_type}'")
            self.properties.record(PropertyKey(name, data_type, cardinality))

    def _process_all_of(self, item: dict) -> None:
        label = _as_text(item.get("title"))
        all_of = self._all_of(item)
        if not all_of:
            return

        ref = _as_text(all_of[0].get("$ref"))
        if ref in (VERTEX_REF, EDGE_REF) and not label:
            logger.warning(f"Definition referencing {ref} has no title; skipping its label")
        elif ref == VERTEX_REF:
            self._emit(self.dialect.vertex_label(label))
        elif ref == EDGE_REF:
            multiplicity = _as_text(item.get("multiplicity"))
            self._emit(self.dialect.edge_label(label, multiplicity))

        # There should only be one section with indexes, but allow for more
        for owner in all_of:
            self._declare_indexes_owned_by(owner)

    def _declare_indexes_owned_by(self, owner: dict) -> None:
        indexes = owner.get("indexes")
        if not isinstance(indexes, dict):
            return

        for entry in self._entries(indexes, "composite"):
            unique = bool(entry.get("unique")) and self.dialect.enforce_unique
            self._declare_index(entry, mixed=False, unique=unique)

        # Text indexes are just mixed indexes
        for section in ("mixed", "text"):
            for entry in self._entries(indexes, section):
                self._declare_index(entry, mixed=True)

    @staticmethod
    def _entries(indexes: dict, section: str) -> list[dict]:
        entries = indexes.get(section)
        if entries is None:
            return []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise SchemaError(f"'{section}' indexes must be an array of objects")
        return entries

    def _declare_index(self, entry: dict, mixed: bool, unique: bool = False) -> None:
        # Every entry uses up a name, even when it turns out to be redundant
        index_name = self._namer.next_name()

        key_names = entry.get("keys")
        if key_names is None:
            key_names = []
        if not isinstance(key_names, list) or not all(isinstance(k, str) for k in key_names):
            raise SchemaError(f"Index {index_name} must list its keys as strings")

        keys = []
        for key_name in key_names:
            key = self.properties.get(key_name.strip())
            if key is None:
                raise SchemaError(f"Index key '{key_name}' is not a declared property")
            if key not in keys:
                keys.append(key)

        if not keys:
            logger.debug(f"Skipping {index_name}: no keys")
            return
        if any(key.declared for key in keys):
            # The keys must be created in the index's own transaction
            logger.debug(f"Skipping {index_name}: keys {key_names} already declared")
            return

        self._emit(self.dialect.index_declaration(index_name, keys, mixed=mixed, unique=unique))
        for key in keys:
            key.declared = True


def load_ontology(path: str | Path) -> dict:
    """Read an ontology schema file.

    Raises:
        OSError: If the file cannot be read.
        SchemaError: If the file is not valid JSON.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"{path} is not valid JSON: {e}") from e


def plan_ontology(root: dict, dialect: GremlinDialect | None = None) -> list[str]:
    """Build the Gremlin scripts for a decoded ontology document."""
    return OntologyPlanner(dialect).plan(root)
