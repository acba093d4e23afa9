"""One-shot data-store check run by the startup sequence before the listener binds.

The check is a single `SELECT 1` attempt with no retries. It is not consulted by
the liveness route, so a later outage never changes `/health`.
"""

import logging

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from tianguistore.domain import HealthStatus

from .interfaces import DatabaseHealthPort

logger = logging.getLogger(__name__)

STARTUP_CHECK_QUERY = "SELECT 1"


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Startup connectivity check backed by a SQLAlchemy engine.

    Called once per process by the startup sequence. A failure aborts startup;
    nothing here retries or keeps polling afterwards.
    """

    def __init__(self, engine: Engine):
        """Initialize database health service.

        Args:
            engine: SQLAlchemy engine used for connectivity checks.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL for diagnostics.

        Returns:
            str: Rendered engine URL string with the password hidden.
        """

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Verify database connectivity using one lightweight query, without retries.

        Returns:
            HealthStatus: Health payload with status and diagnostic detail.

        Raises:
            ConnectionError: Raised when connectivity check fails.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text(STARTUP_CHECK_QUERY))
        except SQLAlchemyError as error:
            logger.debug("database connectivity check failed", exc_info=True)
            raise ConnectionError(f"database connectivity check failed: {error.__class__.__name__}") from error
        return HealthStatus(status="ok", detail="database connectivity verified")
