"""CLI entrypoint for graph schema provisioning.

Usage:
    python -m graph_init schema [--ontology PATH]         # ontology -> Gremlin
    python -m graph_init indexes [--spec DIR] [--file F]  # index spec -> backend DDL
                                 [--dialect D]         # dialect for inmemory runs

Options shared by both commands:
    --db-type {gremlin,orientdb,neo4j,inmemory}  (default: STUCCO_DB_TYPE)
    --test       load connection settings from STUCCO_DB_TEST_CONFIG
    --dry-run    print the statements instead of sending them
    --fail-fast  stop at the first statement that fails every attempt
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from graph_init.config import DBType, configure_logging, load_settings
from graph_init.dialects import DIALECT_NAMES
from graph_init.exceptions import GraphInitError
from graph_init.index_spec import DEFAULT_SPEC_FILE
from graph_init.provision import (
    apply_statements,
    build_index_statements,
    build_ontology_statements,
    resolve_index_spec_path,
    resolve_ontology_path,
)

logger = logging.getLogger("graph_init")


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--db-type",
        type=str.lower,
        choices=[t.value for t in DBType],
        help="Graph database backend (default: STUCCO_DB_TYPE)",
    )
    common.add_argument("--test", action="store_true", help="Use the test connection config")
    common.add_argument("--dry-run", action="store_true", help="Print statements without a database")
    common.add_argument("--fail-fast", action="store_true", help="Abort when a statement keeps failing")

    parser = argparse.ArgumentParser(
        prog="graph-init",
        description="Provision graph database schema and indexes",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    schema = subparsers.add_parser(
        "schema",
        parents=[common],
        help="Declare labels, property keys and indexes from the ontology schema",
    )
    schema.add_argument("--ontology", help="Path to the ontology schema JSON")

    indexes = subparsers.add_parser(
        "indexes",
        parents=[common],
        help="Declare indexes and their properties from the index specification",
    )
    indexes.add_argument("--spec", help="Directory holding the index specification")
    indexes.add_argument(
        "--file",
        default=DEFAULT_SPEC_FILE,
        help=f"Index specification file name (default: {DEFAULT_SPEC_FILE})",
    )
    indexes.add_argument("--dialect", choices=DIALECT_NAMES, help="Statement dialect for in-memory runs")
    return parser


def run(args: argparse.Namespace) -> int:
    """Plan and apply the requested command. Returns exit code."""
    try:
        settings = load_settings(test_mode=args.test)
    except (FileNotFoundError, ValidationError) as e:
        configure_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings.log_level)
    if args.fail_fast:
        settings = settings.model_copy(update={"fail_fast": True})

    db_type = DBType(args.db_type) if args.db_type else settings.db_type
    if db_type is None:
        if not args.dry_run:
            logger.error("Missing environment variable STUCCO_DB_TYPE (or --db-type)")
            return 1
        db_type = DBType.INMEMORY

    try:
        if args.command == "schema":
            path = resolve_ontology_path(args.ontology, settings)
            statements = build_ontology_statements(path, settings, db_type)
        else:
            path = resolve_index_spec_path(args.spec, settings, args.file)
            statements = build_index_statements(path, settings, db_type, args.dialect)
    except OSError as e:
        logger.error(f"Error in opening file, path or file does not exist: {e}")
        return 1
    except (GraphInitError, ValueError) as e:
        logger.error(f"Cannot plan {args.command}: {e}")
        return 1

    if args.dry_run:
        for statement in statements:
            print(statement)
        return 0

    try:
        result = apply_statements(statements, settings, db_type)
    except (GraphInitError, ValueError) as e:
        logger.error(f"Provisioning {args.command} failed: {e}")
        return 1

    logger.info(f"Provisioned {args.command}: {len(result.succeeded)} succeeded, {len(result.skipped)} skipped")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
