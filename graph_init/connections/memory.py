"""In-memory connection that records statements instead of running them."""

import logging

from graph_init.config import Settings
from graph_init.connections.base import GraphConnection

logger = logging.getLogger(__name__)


class InMemoryConnection(GraphConnection):
    """Collects every executed statement, for dry runs and tests."""

    def __init__(self) -> None:
        self.statements: list[str] = []
        self.is_open = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "InMemoryConnection":
        return cls()

    def open(self) -> None:
        self.is_open = True
        logger.debug("In-memory connection opened")

    def close(self) -> None:
        self.is_open = False

    def execute(self, statement: str) -> None:
        self.statements.append(statement)
