"""Lambda handler for schema provisioning.

Runs the same workflows as the CLI during deployment. The event selects the
command and, optionally, the input file::

    {"command": "indexes", "path": "/opt/stucco/stucco_indexing.json"}
    {"command": "schema", "path": "/opt/stucco/stucco_schema.json"}
"""

import json
import logging
from typing import Any

from graph_init.config import DBType, configure_logging, load_settings
from graph_init.exceptions import GraphInitError
from graph_init.provision import (
    apply_statements,
    build_index_statements,
    build_ontology_statements,
    resolve_index_spec_path,
    resolve_ontology_path,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body)}


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler for schema provisioning.

    Args:
        event: ``command`` ("indexes" or "schema"), optional ``path``,
            optional ``test`` flag.
        context: Lambda context (unused).

    Returns:
        Response with the provisioning result.
    """
    event = event or {}
    command = event.get("command", "indexes")
    if command not in ("indexes", "schema"):
        return _response(400, {"error": f"Unknown command '{command}'"})

    logger.info(f"Starting {command} provisioning...")

    try:
        settings = load_settings(test_mode=bool(event.get("test")))
        configure_logging(settings.log_level)
        if settings.db_type is None:
            raise ValueError("Missing environment variable STUCCO_DB_TYPE")
        db_type: DBType = settings.db_type

        if command == "schema":
            path = resolve_ontology_path(event.get("path"), settings)
            statements = build_ontology_statements(path, settings, db_type)
        else:
            path = event.get("path") or resolve_index_spec_path(None, settings)
            statements = build_index_statements(path, settings, db_type)

        result = apply_statements(statements, settings, db_type)
        logger.info(f"Provisioning complete: {result.to_dict()}")
        return _response(
            200,
            {
                "message": f"{command} provisioning complete",
                "result": result.to_dict(),
            },
        )

    except (GraphInitError, OSError, ValueError) as e:
        logger.error(f"Provisioning failed: {e}", exc_info=True)
        return _response(
            500,
            {
                "error": str(e),
                "message": f"{command} provisioning failed",
            },
        )


# For local testing
if __name__ == "__main__":
    result = handler({}, None)
    print(json.dumps(json.loads(result["body"]), indent=2))
