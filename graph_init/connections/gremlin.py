"""Gremlin Server connection (JanusGraph/Titan)."""

import logging
from typing import Any

from gremlin_python.driver import client, serializer
from gremlin_python.driver.protocol import GremlinServerError

from graph_init.config import Settings
from graph_init.connections.base import GraphConnection
from graph_init.exceptions import DatabaseConnectionError, StatementError

logger = logging.getLogger(__name__)


class GremlinConnection(GraphConnection):
    """Submits Groovy management scripts to a Gremlin Server."""

    def __init__(
        self,
        url: str = "ws://localhost:8182/gremlin",
        traversal_source: str = "g",
        username: str = "",
        password: str = "",
    ):
        """Initialize the connection.

        Args:
            url: Gremlin Server websocket endpoint.
            traversal_source: Name of the server-side traversal source.
            username: Optional username for authenticated servers.
            password: Optional password for authenticated servers.
        """
        self.url = url
        self.traversal_source = traversal_source
        self.username = username
        self.password = password
        self._client: client.Client | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GremlinConnection":
        return cls(
            url=settings.gremlin_url,
            traversal_source=settings.gremlin_traversal_source,
            username=settings.gremlin_username,
            password=settings.gremlin_password,
        )

    def open(self) -> None:
        kwargs: dict[str, Any] = {"message_serializer": serializer.GraphSONSerializersV3d0()}
        if self.username:
            kwargs["username"] = self.username
            kwargs["password"] = self.password

        try:
            self._client = client.Client(self.url, self.traversal_source, **kwargs)
            # Scripts are sent lazily, so make a round trip now
            self._client.submit("1").all().result()
        except Exception as e:
            self.close()
            raise DatabaseConnectionError(f"Cannot connect to Gremlin Server at {self.url}: {e}") from e

        logger.info(f"Connected to Gremlin Server at {self.url}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("Gremlin connection closed")

    def execute(self, statement: str) -> list[Any]:
        if self._client is None:
            raise DatabaseConnectionError("Gremlin connection is not open")

        try:
            return self._client.submit(statement).all().result()
        except GremlinServerError as e:
            raise StatementError(f"Gremlin Server rejected request: {e}") from e
        except Exception as e:
            raise StatementError(f"Gremlin request failed: {e}") from e
