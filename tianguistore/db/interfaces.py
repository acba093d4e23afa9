"""Typed interfaces for database-layer services.

All SQL and engine access must remain in the db package and its submodules.
"""

from typing import Protocol

from tianguistore.domain import HealthStatus


class DatabaseHealthPort(Protocol):
    """Port definition for the one-shot startup data-store check.

    Implementations make a single attempt per call and never retry. The startup
    sequence calls `db_check_health` once, before binding the listener.
    """

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity with a single round-trip query and no retries.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """
