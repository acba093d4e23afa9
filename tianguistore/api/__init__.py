"""API layer package for FastAPI application and pipeline composition."""

from .application import create_api_application

__all__ = ["create_api_application"]
