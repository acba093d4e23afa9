"""Database engine utilities.

This module centralizes data-store connectivity primitives so route groups and
startup checks share a single SQLAlchemy engine.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import URL

from tianguistore.config import AppSettings


def db_build_url(settings: AppSettings) -> URL:
    """Build the SQLAlchemy URL from validated connection settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        URL: Data-store URL. An empty password is rendered as no password.
    """

    return URL.create(
        drivername=settings.db_driver,
        username=settings.db_user,
        password=settings.db_password or None,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


def db_create_engine(settings: AppSettings) -> Engine:
    """Create the SQLAlchemy engine for application database access.

    Creating the engine does not open a connection.

    Args:
        settings: Validated runtime settings.

    Returns:
        Engine: Configured SQLAlchemy engine.
    """

    return create_engine(db_build_url(settings), pool_pre_ping=True)
