"""Application configuration using Pydantic Settings."""

import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class DBType(str, Enum):
    """Supported graph database backends."""

    GREMLIN = "gremlin"
    ORIENTDB = "orientdb"
    NEO4J = "neo4j"
    INMEMORY = "inmemory"


def get_secret_from_aws(secret_arn: str) -> str:
    """Fetch a secret value from AWS Secrets Manager.

    Args:
        secret_arn: The ARN or name of the secret.

    Returns:
        The secret value, or empty string if not found.
    """
    if not secret_arn:
        return ""

    try:
        import boto3

        client = boto3.client("secretsmanager")
        response = client.get_secret_value(SecretId=secret_arn)
        return response.get("SecretString", "")
    except Exception as e:
        logger.error(f"Failed to fetch secret {secret_arn}: {e}")
        return ""


def get_json_secret_from_aws(secret_arn: str) -> dict:
    """Fetch a JSON secret from AWS Secrets Manager.

    Returns:
        The decoded secret, or an empty dict if missing or not a JSON object.
    """
    secret_string = get_secret_from_aws(secret_arn)
    if not secret_string:
        return {}

    try:
        secret_data = json.loads(secret_string)
    except (json.JSONDecodeError, TypeError):
        logger.error(f"Failed to parse secret {secret_arn} as JSON")
        return {}
    return secret_data if isinstance(secret_data, dict) else {}


class Settings(BaseSettings):
    """Settings loaded from STUCCO_* environment variables.

    Connection settings may also come from the env-style file named by
    STUCCO_DB_CONFIG (or STUCCO_DB_TEST_CONFIG in test mode). Real environment
    variables take precedence over the file.
    """

    model_config = SettingsConfigDict(
        env_prefix="STUCCO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend selection
    db_type: DBType | None = None
    db_config: str = ""  # env-style file with connection settings
    db_test_config: str = ""  # used instead of db_config with --test

    # Input files
    db_index_config: str = ""  # path to the index specification JSON
    ontology_file: str = ""  # path to the ontology schema JSON

    # Execution
    request_attempts: int = 3
    fail_fast: bool = False
    log_level: str = "INFO"

    # Gremlin Server (JanusGraph/Titan management API)
    gremlin_url: str = "ws://localhost:8182/gremlin"
    gremlin_traversal_source: str = "g"
    gremlin_graph: str = "graph"
    gremlin_mixed_index_backend: str = "search"
    gremlin_username: str = ""
    gremlin_password: str = ""
    gremlin_enforce_unique: bool = False

    # OrientDB HTTP API
    orientdb_url: str = "http://localhost:2480"
    orientdb_database: str = "stucco"
    orientdb_username: str = "root"
    orientdb_password: str = ""
    orientdb_password_secret_arn: str = ""
    orientdb_vertex_class: str = "V"
    orientdb_timeout_seconds: float = 30.0

    # Neo4j
    neo4j_uri: str = ""  # e.g., bolt://localhost:7687
    neo4j_username: str = "neo4j"
    neo4j_password: str = ""
    neo4j_database: str = "neo4j"
    neo4j_secret_arn: str = ""  # AWS Secrets Manager ARN for Neo4j credentials
    neo4j_vertex_label: str = "Vertex"

    @field_validator("db_type", mode="before")
    @classmethod
    def _normalize_db_type(cls, value):
        # Accept ORIENTDB as well as orientdb
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value

    @field_validator("request_attempts")
    @classmethod
    def _check_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("request_attempts must be at least 1")
        return value

    @property
    def resolved_orientdb_password(self) -> str:
        """Get OrientDB password, fetching from Secrets Manager if needed."""
        if self.orientdb_password:
            return self.orientdb_password
        if self.orientdb_password_secret_arn:
            return get_secret_from_aws(self.orientdb_password_secret_arn)
        return ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_settings(test_mode: bool = False) -> Settings:
    """Load settings, layering in the connection config file if one is named.

    Args:
        test_mode: Use STUCCO_DB_TEST_CONFIG instead of STUCCO_DB_CONFIG.

    Returns:
        Settings instance.

    Raises:
        FileNotFoundError: If the named connection config file does not exist.
    """
    base = get_settings()
    config_file = base.db_test_config if test_mode else base.db_config
    if not config_file:
        if test_mode:
            logger.warning("Test mode requested but STUCCO_DB_TEST_CONFIG is not set")
        return base

    if not Path(config_file).is_file():
        raise FileNotFoundError(f"Connection config file not found: {config_file}")

    logger.info(f"Loading connection config from {config_file}")
    return Settings(_env_file=config_file)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the CLI and the Lambda handler."""
    logging.basicConfig(level=level.upper(), format="%(levelname)s: %(message)s")
    # basicConfig is a no-op once the root logger has handlers (e.g. on Lambda)
    logging.getLogger().setLevel(level.upper())
    # Suppress noisy driver logging (e.g., "index already exists" notifications)
    logging.getLogger("neo4j").setLevel(logging.ERROR)
    logging.getLogger("gremlinpython").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
