"""Graph database connections.

Backend modules are loaded on demand by :func:`get_connection`, so only the
selected backend's driver needs to be importable.
"""

from graph_init.connections.base import GraphConnection, get_connection
from graph_init.connections.memory import InMemoryConnection

__all__ = [
    "GraphConnection",
    "InMemoryConnection",
    "get_connection",
]
