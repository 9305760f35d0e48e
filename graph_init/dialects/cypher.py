"""Neo4j Cypher index and constraint DDL.

Neo4j properties are schema-optional, so only indexes are declared.
"""

from graph_init.dialects.base import IndexDialect, is_fulltext, is_unique
from graph_init.properties import IndexNamer, PropertyKey


def _quote(identifier: str) -> str:
    return "`" + identifier.replace("`", "``") + "`"


class CypherDialect(IndexDialect):
    """Builds idempotent CREATE INDEX / CREATE CONSTRAINT statements."""

    name = "cypher"

    def __init__(self, label: str = "Vertex"):
        self.label = label

    def create_index(self, index_name: str, key_name: str, index_type: str) -> str:
        node = f"(n:{_quote(self.label)})"
        prop = f"n.{_quote(key_name)}"

        if is_unique(index_type):
            return (
                f"CREATE CONSTRAINT {index_name} IF NOT EXISTS "
                f"FOR {node} REQUIRE {prop} IS UNIQUE"
            )
        if is_fulltext(index_type):
            return f"CREATE FULLTEXT INDEX {index_name} IF NOT EXISTS FOR {node} ON EACH [{prop}]"
        return f"CREATE INDEX {index_name} IF NOT EXISTS FOR {node} ON ({prop})"

    def index_statements(
        self,
        index_type: str,
        keys: list[PropertyKey],
        new_keys: list[PropertyKey],
        namer: IndexNamer,
    ) -> list[str]:
        return [self.create_index(namer.next_name(), key.name, index_type) for key in keys]
