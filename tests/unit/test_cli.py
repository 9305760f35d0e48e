"""Unit tests for the graph-init command line."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from graph_init.__main__ import build_parser, main
from graph_init.connections.memory import InMemoryConnection
from graph_init.exceptions import StatementError

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def clean_env():
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def memory_connection():
    connection = InMemoryConnection()
    with patch("graph_init.provision.get_connection", return_value=connection):
        yield connection


class TestParser:
    """Tests for argument parsing."""

    def test_indexes_defaults(self):
        args = build_parser().parse_args(["indexes"])
        assert args.command == "indexes"
        assert args.file == "stucco_indexing.json"
        assert args.spec is None
        assert args.test is False
        assert args.dry_run is False

    def test_db_type_is_lowercased(self):
        args = build_parser().parse_args(["schema", "--db-type", "GREMLIN"])
        assert args.db_type == "gremlin"

    def test_dialect_only_for_indexes(self):
        assert build_parser().parse_args(["indexes", "--dialect", "cypher"]).dialect == "cypher"
        with pytest.raises(SystemExit):
            build_parser().parse_args(["schema", "--dialect", "cypher"])

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_unknown_db_type_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["indexes", "--db-type", "titan"])


class TestDryRun:
    """Tests for printing statements without a database."""

    def test_indexes_for_orientdb(self, clean_env, capsys):
        exit_code = main(["indexes", "--spec", str(FIXTURES), "--db-type", "orientdb", "--dry-run"])
        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "CREATE PROPERTY V.name String"
        assert lines[-1] == "CREATE INDEX index3 ON V (name) UNIQUE"
        assert len(lines) == 7

    def test_dry_run_without_db_type_uses_sql(self, clean_env, capsys):
        exit_code = main(["indexes", "--spec", str(FIXTURES), "--dry-run"])
        assert exit_code == 0
        assert capsys.readouterr().out.startswith("CREATE PROPERTY V.name String\n")

    def test_dialect_override(self, clean_env, capsys):
        exit_code = main(["indexes", "--spec", str(FIXTURES), "--dry-run", "--dialect", "cypher"])
        assert exit_code == 0
        assert "CREATE FULLTEXT INDEX index2" in capsys.readouterr().out

    def test_schema(self, clean_env, capsys):
        ontology = str(FIXTURES / "stucco_schema.json")
        exit_code = main(["schema", "--ontology", ontology, "--db-type", "gremlin", "--dry-run"])
        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 11
        assert lines[0] == "m = graph.openManagement();m.makeVertexLabel('Host').make();m.commit();"

    def test_index_config_from_environment(self, capsys):
        env_vars = {"STUCCO_DB_INDEX_CONFIG": str(FIXTURES / "stucco_indexing.json")}
        with patch.dict(os.environ, env_vars, clear=True):
            exit_code = main(["indexes", "--db-type", "orientdb", "--dry-run"])
        assert exit_code == 0
        assert len(capsys.readouterr().out.splitlines()) == 7


class TestApply:
    """Tests for sending statements to a backend."""

    def test_indexes_sent_to_backend(self, clean_env, memory_connection):
        exit_code = main(["indexes", "--spec", str(FIXTURES), "--db-type", "orientdb"])
        assert exit_code == 0
        assert memory_connection.statements[0] == "CREATE PROPERTY V.name String"
        assert len(memory_connection.statements) == 7
        assert not memory_connection.is_open

    def test_db_type_from_environment(self, memory_connection):
        with patch.dict(os.environ, {"STUCCO_DB_TYPE": "GREMLIN"}, clear=True):
            exit_code = main(["schema", "--ontology", str(FIXTURES / "stucco_schema.json")])
        assert exit_code == 0
        assert len(memory_connection.statements) == 11

    def test_failed_statements_are_skipped(self, clean_env):
        connection = MagicMock()
        connection.__enter__.return_value = connection
        connection.execute.side_effect = StatementError("already exists")
        with patch("graph_init.provision.get_connection", return_value=connection):
            exit_code = main(["indexes", "--spec", str(FIXTURES), "--db-type", "orientdb"])
        assert exit_code == 0
        assert connection.execute.call_count == 21

    def test_fail_fast_stops_at_first_failure(self, clean_env):
        connection = MagicMock()
        connection.__enter__.return_value = connection
        connection.execute.side_effect = StatementError("already exists")
        with patch("graph_init.provision.get_connection", return_value=connection):
            exit_code = main(["indexes", "--spec", str(FIXTURES), "--db-type", "orientdb", "--fail-fast"])
        assert exit_code == 1
        assert connection.execute.call_count == 3


class TestErrors:
    """Tests for exit codes on bad input."""

    def test_missing_db_type(self, clean_env):
        assert main(["indexes", "--spec", str(FIXTURES)]) == 1

    def test_missing_spec_file(self, clean_env, tmp_path):
        assert main(["indexes", "--spec", str(tmp_path), "--db-type", "orientdb", "--dry-run"]) == 1

    def test_missing_connection_config(self, tmp_path):
        env_vars = {"STUCCO_DB_CONFIG": str(tmp_path / "absent.env")}
        with patch.dict(os.environ, env_vars, clear=True):
            assert main(["indexes", "--spec", str(FIXTURES), "--dry-run"]) == 1

    def test_schema_requires_gremlin_backend(self, clean_env):
        ontology = str(FIXTURES / "stucco_schema.json")
        assert main(["schema", "--ontology", ontology, "--db-type", "orientdb", "--dry-run"]) == 1

    def test_dialect_must_match_backend(self, clean_env):
        args = ["indexes", "--spec", str(FIXTURES), "--db-type", "neo4j", "--dialect", "sql", "--dry-run"]
        assert main(args) == 1

    def test_malformed_spec(self, clean_env, tmp_path):
        (tmp_path / "stucco_indexing.json").write_text('{"index": []}')
        assert main(["indexes", "--spec", str(tmp_path), "--db-type", "orientdb", "--dry-run"]) == 1
