"""Provisioning workflows shared by the CLI and the Lambda handler."""

import logging
from pathlib import Path

from graph_init.config import DBType, Settings
from graph_init.connections.base import GraphConnection, get_connection
from graph_init.dialects import dialect_for_backend, get_dialect
from graph_init.dialects.gremlin import GremlinDialect
from graph_init.index_spec import DEFAULT_SPEC_FILE, load_index_spec, plan_indexes
from graph_init.ontology import DEFAULT_ONTOLOGY_FILE, load_ontology, plan_ontology
from graph_init.runner import ProvisioningResult, StatementRunner

logger = logging.getLogger(__name__)

# Backends that accept Gremlin management scripts
GREMLIN_BACKENDS = (DBType.GREMLIN, DBType.INMEMORY)


def resolve_index_spec_path(
    spec_dir: str | None,
    settings: Settings,
    file_name: str = DEFAULT_SPEC_FILE,
) -> Path:
    """Locate the index specification.

    An explicit directory wins, then STUCCO_DB_INDEX_CONFIG, then the current
    directory.
    """
    if spec_dir:
        return Path(spec_dir) / file_name
    if settings.db_index_config:
        return Path(settings.db_index_config)
    logger.warning("Using default directory")
    return Path(".") / file_name


def resolve_ontology_path(path: str | None, settings: Settings) -> Path:
    """Locate the ontology schema file."""
    return Path(path or settings.ontology_file or DEFAULT_ONTOLOGY_FILE)


def build_index_statements(
    path: str | Path,
    settings: Settings,
    db_type: DBType,
    dialect_name: str | None = None,
) -> list[str]:
    """Load an index specification and plan it for a backend."""
    dialect = dialect_for_backend(db_type, settings, dialect_name)
    spec = load_index_spec(path)
    logger.info(f"Loaded {len(spec.indexes)} index definitions from {path}")
    return plan_indexes(spec, dialect)


def build_ontology_statements(path: str | Path, settings: Settings, db_type: DBType) -> list[str]:
    """Load an ontology schema and plan its Gremlin scripts.

    Raises:
        ValueError: If the backend does not accept Gremlin scripts.
    """
    if db_type not in GREMLIN_BACKENDS:
        raise ValueError(f"Ontology provisioning requires a Gremlin backend, not '{db_type.value}'")

    dialect = get_dialect(GremlinDialect.name, settings)
    root = load_ontology(path)
    logger.info(f"Loaded ontology schema from {path}")
    return plan_ontology(root, dialect)


def apply_statements(
    statements: list[str],
    settings: Settings,
    db_type: DBType,
    connection: GraphConnection | None = None,
) -> ProvisioningResult:
    """Open a connection and run the statements through a StatementRunner.

    Raises:
        DatabaseConnectionError: If the database cannot be reached.
        ProvisioningError: If a statement fails every attempt in fail-fast mode.
    """
    if connection is None:
        connection = get_connection(db_type, settings)

    with connection:
        runner = StatementRunner(
            connection,
            attempts=settings.request_attempts,
            fail_fast=settings.fail_fast,
        )
        return runner.run_all(statements)
