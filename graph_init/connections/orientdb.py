"""OrientDB connection over the HTTP API."""

import logging
from typing import Any

import httpx

from graph_init.config import Settings
from graph_init.connections.base import GraphConnection
from graph_init.exceptions import DatabaseConnectionError, StatementError

logger = logging.getLogger(__name__)


class OrientDBConnection(GraphConnection):
    """Runs SQL commands through OrientDB's ``/command`` endpoint."""

    def __init__(
        self,
        url: str = "http://localhost:2480",
        database: str = "stucco",
        username: str = "root",
        password: str = "",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the connection.

        Args:
            url: Base URL of the OrientDB HTTP listener.
            database: Database name.
            username: Database user.
            password: Database password.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.url = url.rstrip("/")
        self.database = database
        self.username = username
        self.password = password
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrientDBConnection":
        return cls(
            url=settings.orientdb_url,
            database=settings.orientdb_database,
            username=settings.orientdb_username,
            password=settings.resolved_orientdb_password,
            timeout=settings.orientdb_timeout_seconds,
        )

    def open(self) -> None:
        self._client = httpx.Client(
            base_url=self.url,
            auth=(self.username, self.password),
            timeout=self.timeout,
            transport=self._transport,
        )

        try:
            response = self._client.get(f"/connect/{self.database}")
        except httpx.HTTPError as e:
            self.close()
            raise DatabaseConnectionError(f"Cannot reach OrientDB at {self.url}: {e}") from e

        if response.is_error:
            self.close()
            raise DatabaseConnectionError(
                f"Cannot connect to OrientDB database '{self.database}': "
                f"HTTP {response.status_code} {response.text.strip()}"
            )

        logger.info(f"Connected to OrientDB database '{self.database}' at {self.url}")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("OrientDB connection closed")

    def execute(self, statement: str) -> Any:
        if self._client is None:
            raise DatabaseConnectionError("OrientDB connection is not open")

        try:
            response = self._client.post(
                f"/command/{self.database}/sql",
                content=statement.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
            )
        except httpx.HTTPError as e:
            raise StatementError(f"OrientDB request failed: {e}") from e

        if response.is_error:
            raise StatementError(f"OrientDB returned HTTP {response.status_code}: {response.text.strip()}")

        if not response.content:
            return None
        try:
            return response.json().get("result")
        except ValueError:
            return response.text
