"""Exceptions raised while provisioning a graph schema."""


class GraphInitError(Exception):
    """Base exception for schema provisioning errors."""

    pass


class SchemaError(GraphInitError):
    """The ontology or index specification is malformed."""

    pass


class InconsistentPropertyError(SchemaError):
    """A property was declared twice with different type or cardinality."""

    def __init__(self, name: str, existing: str, conflicting: str):
        self.name = name
        super().__init__(
            f"Inconsistent property declaration for '{name}': "
            f"{existing} vs {conflicting}"
        )


class DatabaseConnectionError(GraphInitError):
    """The graph database could not be reached."""

    pass


class StatementError(GraphInitError):
    """The database rejected a single administrative statement.

    Statement errors are retried by the runner.
    """

    pass


class ProvisioningError(GraphInitError):
    """A statement still failed after all attempts (fail-fast mode)."""

    def __init__(self, statement: str, attempts: int):
        self.statement = statement
        self.attempts = attempts
        super().__init__(f"DB request failed after {attempts} attempts: {statement}")
