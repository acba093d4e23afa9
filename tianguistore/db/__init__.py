"""Database layer package for data-store connectivity boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import DatabaseHealthPort
from .session import db_build_url, db_create_engine

__all__ = [
    "DatabaseHealthPort",
    "SQLAlchemyDatabaseHealthService",
    "db_build_url",
    "db_create_engine",
]
