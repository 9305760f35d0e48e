"""Neo4j connection for index and constraint DDL."""

import logging
from typing import Any

from neo4j import Driver, GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from graph_init.config import Settings, get_json_secret_from_aws
from graph_init.connections.base import GraphConnection
from graph_init.exceptions import DatabaseConnectionError, StatementError

logger = logging.getLogger(__name__)


def get_neo4j_credentials(settings: Settings) -> dict[str, str]:
    """Get Neo4j credentials from settings or AWS Secrets Manager.

    Returns:
        Dictionary with uri, username, password, and database.
    """
    # Try direct settings first
    if settings.neo4j_uri and settings.neo4j_password:
        return {
            "uri": settings.neo4j_uri,
            "username": settings.neo4j_username,
            "password": settings.neo4j_password,
            "database": settings.neo4j_database,
        }

    # Fall back to AWS Secrets Manager
    if settings.neo4j_secret_arn:
        secret_data = get_json_secret_from_aws(settings.neo4j_secret_arn)
        if secret_data:
            return {
                "uri": secret_data.get("uri", ""),
                "username": secret_data.get("username", "neo4j"),
                "password": secret_data.get("password", ""),
                "database": secret_data.get("database", "neo4j"),
            }

    return {
        "uri": settings.neo4j_uri,
        "username": settings.neo4j_username,
        "password": "",
        "database": settings.neo4j_database,
    }


class Neo4jConnection(GraphConnection):
    """Runs Cypher schema statements, one auto-commit transaction each."""

    def __init__(self, uri: str, username: str, password: str, database: str = "neo4j"):
        self.uri = uri
        self.username = username
        self.password = password
        self.database = database
        self._driver: Driver | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Neo4jConnection":
        credentials = get_neo4j_credentials(settings)
        return cls(
            uri=credentials["uri"],
            username=credentials["username"],
            password=credentials["password"],
            database=credentials["database"],
        )

    def open(self) -> None:
        if not self.uri or not self.password:
            raise DatabaseConnectionError(
                "Neo4j credentials not configured. "
                "Set STUCCO_NEO4J_URI and STUCCO_NEO4J_PASSWORD or STUCCO_NEO4J_SECRET_ARN."
            )

        try:
            self._driver = GraphDatabase.driver(self.uri, auth=(self.username, self.password))
            self._driver.verify_connectivity()
        except (DriverError, Neo4jError, ValueError) as e:
            self.close()
            raise DatabaseConnectionError(f"Cannot connect to Neo4j at {self.uri}: {e}") from e

        logger.info(f"Connected to Neo4j at {self.uri}")

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None
            logger.info("Neo4j driver closed")

    def execute(self, statement: str) -> Any:
        if self._driver is None:
            raise DatabaseConnectionError("Neo4j connection is not open")

        try:
            with self._driver.session(database=self.database) as session:
                return session.run(statement).consume()
        except (DriverError, Neo4jError) as e:
            raise StatementError(f"Neo4j rejected statement: {e}") from e
