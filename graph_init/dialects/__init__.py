"""Statement dialects for the supported graph backends."""

from graph_init.config import DBType, Settings
from graph_init.dialects.base import INDEX_TYPES, IndexDialect, is_fulltext, is_unique
from graph_init.dialects.cypher import CypherDialect
from graph_init.dialects.gremlin import GremlinDialect
from graph_init.dialects.sql import SqlDialect

DIALECT_NAMES = (GremlinDialect.name, SqlDialect.name, CypherDialect.name)

# Dialect each backend speaks natively
_BACKEND_DIALECTS = {
    DBType.GREMLIN: GremlinDialect.name,
    DBType.ORIENTDB: SqlDialect.name,
    DBType.NEO4J: CypherDialect.name,
}


def get_dialect(name: str, settings: Settings) -> IndexDialect:
    """Create the named dialect, configured from settings.

    Raises:
        ValueError: If the name is not a known dialect.
    """
    if name == GremlinDialect.name:
        return GremlinDialect(
            graph=settings.gremlin_graph,
            mixed_index_backend=settings.gremlin_mixed_index_backend,
            enforce_unique=settings.gremlin_enforce_unique,
        )
    if name == SqlDialect.name:
        return SqlDialect(vertex_class=settings.orientdb_vertex_class)
    if name == CypherDialect.name:
        return CypherDialect(label=settings.neo4j_vertex_label)
    raise ValueError(f"Unknown dialect '{name}', expected one of {', '.join(DIALECT_NAMES)}")


def dialect_for_backend(db_type: DBType, settings: Settings, override: str | None = None) -> IndexDialect:
    """Pick the dialect for a backend.

    The in-memory backend speaks any dialect and defaults to SQL.

    Raises:
        ValueError: If ``override`` names a dialect the backend cannot run.
    """
    native = _BACKEND_DIALECTS.get(db_type)
    if override and native and override != native:
        raise ValueError(f"Backend '{db_type.value}' only accepts the {native} dialect")
    return get_dialect(override or native or SqlDialect.name, settings)


__all__ = [
    "DIALECT_NAMES",
    "INDEX_TYPES",
    "CypherDialect",
    "GremlinDialect",
    "IndexDialect",
    "SqlDialect",
    "dialect_for_backend",
    "get_dialect",
    "is_fulltext",
    "is_unique",
]
