"""FastAPI application factory for the front-controller pipeline.

Request flow, outermost first:

    SecurityHeaders -> ParameterPollution -> CORS -> ErrorBoundary
        -> JsonBody -> StaticAsset -> router

Router order: `/health`, route groups in mount-table order, entry pages,
catch-all fallback.
"""

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from tianguistore.config import AppSettings

from .middleware import (
    ErrorBoundaryMiddleware,
    JsonBodyMiddleware,
    ParameterPollutionMiddleware,
    SecurityHeadersMiddleware,
    StaticAssetMiddleware,
    api_build_cors_options,
)
from .routers import (
    RouteMountTable,
    api_create_fallback_router,
    api_create_health_router,
    api_create_page_router,
)


def create_api_application(settings: AppSettings, route_mounts: RouteMountTable | None = None) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings.
        route_mounts: Route mount table for the domain route groups. None mounts no groups.

    Returns:
        FastAPI: Application with the full middleware chain and routes registered.
    """

    application = FastAPI(
        title="TianguiStore",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    application.include_router(api_create_health_router())
    if route_mounts is not None:
        route_mounts.api_mount_into(application)
    application.include_router(api_create_page_router(settings.public_directory))
    application.include_router(api_create_fallback_router(settings.public_directory))

    # add_middleware wraps the current stack, so registration runs innermost first.
    application.add_middleware(StaticAssetMiddleware, directory=settings.public_directory)
    application.add_middleware(JsonBodyMiddleware)
    application.add_middleware(ErrorBoundaryMiddleware, development_mode=settings.is_development)
    application.add_middleware(CORSMiddleware, **api_build_cors_options(settings))
    application.add_middleware(ParameterPollutionMiddleware)
    application.add_middleware(SecurityHeadersMiddleware, development_mode=settings.is_development)

    return application
