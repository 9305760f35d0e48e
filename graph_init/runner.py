"""Statement runner.

Sends planned statements to a connection, retrying each failed statement a
fixed number of times before giving up on it.
"""

import logging
from dataclasses import dataclass, field

from graph_init.connections.base import GraphConnection
from graph_init.exceptions import ProvisioningError, StatementError

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 3


@dataclass
class ProvisioningResult:
    """Outcome of running a batch of statements."""

    succeeded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.skipped)

    @property
    def ok(self) -> bool:
        return not self.skipped

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "succeeded": len(self.succeeded),
            "skipped": self.skipped,
        }


class StatementRunner:
    """Runs statements against a connection with fixed-count retry."""

    def __init__(
        self,
        connection: GraphConnection,
        attempts: int = DEFAULT_ATTEMPTS,
        fail_fast: bool = False,
    ):
        """Initialize the runner.

        Args:
            connection: An open connection.
            attempts: Tries per statement before giving up on it.
            fail_fast: Raise ProvisioningError instead of skipping a statement
                that failed every attempt.
        """
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.connection = connection
        self.attempts = attempts
        self.fail_fast = fail_fast

    def execute(self, statement: str) -> bool:
        """Run one statement.

        Returns:
            True if the statement succeeded, False if it was skipped.

        Raises:
            ProvisioningError: If every attempt failed and fail_fast is set.
        """
        logger.info(f"Making DB request: {statement}")
        for _attempt in range(self.attempts):
            try:
                self.connection.execute(statement)
                logger.info("    DB request succeeded")
                return True
            except StatementError as e:
                logger.error(f"    DB request failed: {e}")

        logger.error(f"    Skipping DB request after {self.attempts} failed attempts.")
        if self.fail_fast:
            raise ProvisioningError(statement, self.attempts)
        return False

    def run_all(self, statements: list[str]) -> ProvisioningResult:
        """Run statements in order, continuing past skipped ones."""
        result = ProvisioningResult()
        for statement in statements:
            statement = statement.strip()
            if not statement:
                continue
            if self.execute(statement):
                result.succeeded.append(statement)
            else:
                result.skipped.append(statement)

        if result.skipped:
            logger.warning(f"{len(result.skipped)} of {result.total} DB requests were skipped")
        else:
            logger.info(f"All {result.total} DB requests succeeded")
        return result
