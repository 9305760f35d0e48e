"""OrientDB SQL property and index DDL."""

from graph_init.dialects.base import IndexDialect
from graph_init.properties import IndexNamer, PropertyKey


class SqlDialect(IndexDialect):
    """Builds CREATE PROPERTY / CREATE INDEX statements on the vertex class.

    Each key of an index specification entry gets its own single-property
    index.
    """

    name = "sql"

    def __init__(self, vertex_class: str = "V"):
        self.vertex_class = vertex_class

    def create_property(self, key: PropertyKey) -> str:
        return f"CREATE PROPERTY {self.vertex_class}.{key.name} {key.data_type}"

    def create_index(self, index_name: str, key_name: str, index_type: str) -> str:
        return f"CREATE INDEX {index_name} ON {self.vertex_class} ({key_name}) {index_type}"

    def index_statements(
        self,
        index_type: str,
        keys: list[PropertyKey],
        new_keys: list[PropertyKey],
        namer: IndexNamer,
    ) -> list[str]:
        statements = [self.create_property(key) for key in new_keys]
        statements.extend(
            self.create_index(namer.next_name(), key.name, index_type) for key in keys
        )
        return statements
