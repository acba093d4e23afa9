"""API router package for endpoint composition."""

from .fallback import api_create_fallback_router
from .health import api_create_health_router
from .pages import PAGE_ROUTES, api_create_page_router
from .route_groups import (
    ROUTE_GROUP_PREFIXES,
    RouteGroupPort,
    RouteMount,
    RouteMountTable,
    RouterRouteGroup,
    api_build_route_mount_table,
)

__all__ = [
    "PAGE_ROUTES",
    "ROUTE_GROUP_PREFIXES",
    "RouteGroupPort",
    "RouteMount",
    "RouteMountTable",
    "RouterRouteGroup",
    "api_build_route_mount_table",
    "api_create_fallback_router",
    "api_create_health_router",
    "api_create_page_router",
]
