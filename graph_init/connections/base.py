"""Abstract graph connection interface and factory.

Each backend is registered by the fully-qualified name of its
:class:`GraphConnection` subclass, so a backend's driver is only imported
when that backend is selected.
"""

import importlib
import logging
from abc import ABC, abstractmethod
from typing import Any

from graph_init.config import DBType, Settings

logger = logging.getLogger(__name__)

_CONNECTION_CLASSES: dict[DBType, str] = {
    DBType.GREMLIN: "graph_init.connections.gremlin.GremlinConnection",
    DBType.ORIENTDB: "graph_init.connections.orientdb.OrientDBConnection",
    DBType.NEO4J: "graph_init.connections.neo4j.Neo4jConnection",
    DBType.INMEMORY: "graph_init.connections.memory.InMemoryConnection",
}


class GraphConnection(ABC):
    """A connection that accepts administrative statements.

    Implementations raise :class:`~graph_init.exceptions.StatementError` when
    the database rejects a statement, and
    :class:`~graph_init.exceptions.DatabaseConnectionError` when it cannot be
    reached at all.
    """

    @classmethod
    @abstractmethod
    def from_settings(cls, settings: Settings) -> "GraphConnection":
        """Create a connection configured from settings."""
        ...

    @abstractmethod
    def open(self) -> None:
        """Connect to the database."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...

    @abstractmethod
    def execute(self, statement: str) -> Any:
        """Run one statement and return the backend's result."""
        ...

    def __enter__(self) -> "GraphConnection":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _load_connection_class(class_path: str) -> type[GraphConnection]:
    """Dynamically import a GraphConnection subclass by its fully-qualified name.

    Args:
        class_path: e.g. ``"graph_init.connections.neo4j.Neo4jConnection"``

    Returns:
        The connection **class** (not an instance).

    Raises:
        ValueError: If the path is malformed, the module cannot be imported,
            the attribute doesn't exist, or it isn't a GraphConnection subclass.
    """
    if "." not in class_path:
        raise ValueError(f"Connection class must be a fully-qualified class name, got: '{class_path}'")

    module_path, class_name = class_path.rsplit(".", 1)

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ValueError(f"Cannot import module '{module_path}' for '{class_path}': {exc}") from exc

    cls = getattr(module, class_name, None)
    if cls is None:
        raise ValueError(f"Module '{module_path}' has no attribute '{class_name}'")

    if not (isinstance(cls, type) and issubclass(cls, GraphConnection)):
        raise ValueError(f"'{class_path}' is not a GraphConnection subclass (got {type(cls).__name__})")

    return cls


def get_connection(db_type: DBType | str, settings: Settings) -> GraphConnection:
    """Create an (unopened) connection for the given backend.

    Raises:
        ValueError: If the backend type is unknown.
    """
    if not isinstance(db_type, DBType):
        try:
            db_type = DBType(str(db_type).strip().lower())
        except ValueError:
            choices = ", ".join(t.value for t in DBType)
            raise ValueError(f"Unknown database type '{db_type}', expected one of {choices}") from None

    class_path = _CONNECTION_CLASSES[db_type]
    cls = _load_connection_class(class_path)
    logger.info("Using %s connection: %s", db_type.value, class_path)
    return cls.from_settings(settings)
