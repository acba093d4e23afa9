"""Route mount table for the domain route groups.

Route groups are external collaborators. Each one supplies an `APIRouter` and
is mounted under a fixed path prefix. The table is built once at startup and
its order is the dispatch precedence.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

ROUTE_GROUP_PREFIXES: tuple[tuple[str, str], ...] = (
    ("auth", "/auth"),
    ("productos", "/productos"),
    ("carrito", "/carrito"),
    ("pedidos", "/pedidos"),
    ("categorias", "/categorias"),
    ("marcas", "/marcas"),
    ("marketing", "/marketing"),
    ("usuarios", "/usuarios"),
    ("configuracion", "/configuracion"),
    ("estadisticas", "/estadisticas"),
    ("test", "/api/test"),
)


class RouteGroupPort(Protocol):
    """Port definition for a route group mounted under one URL prefix."""

    def api_create_router(self) -> APIRouter:
        """Return the router handling every path below the group's prefix.

        Returns:
            APIRouter: Router whose paths are relative to the mount prefix.
        """


@dataclass(frozen=True)
class RouterRouteGroup:
    """Route group adapter around an already built router.

    Attributes:
        router: Router handling the group's paths.
    """

    router: APIRouter

    def api_create_router(self) -> APIRouter:
        return self.router


@dataclass(frozen=True)
class RouteMount:
    """One entry of the route mount table.

    Attributes:
        prefix: Absolute path prefix without trailing slash.
        route_group: Route group bound to the prefix.
        name: Route group name, used for logs and OpenAPI tags.
    """

    prefix: str
    route_group: RouteGroupPort
    name: str = ""

    def matches(self, path: str) -> bool:
        """Return whether a request path falls under this mount's prefix.

        Args:
            path: Request path.

        Returns:
            bool: True for the prefix itself and any path below it.
        """

        return path == self.prefix or path.startswith(f"{self.prefix}/")


def _prefixes_nest(outer: str, inner: str) -> bool:
    return inner.startswith(f"{outer}/")


class RouteMountTable:
    """Immutable ordered sequence of route mounts. First matching prefix wins."""

    def __init__(self, mounts: Sequence[RouteMount], allow_nested_prefixes: bool = False):
        """Validate and freeze the mount table.

        Args:
            mounts: Mounts in dispatch order.
            allow_nested_prefixes: Accept prefixes nested under another prefix, making table order
                the documented precedence between them.

        Raises:
            ValueError: Raised for malformed, duplicate or undeclared nested prefixes.
        """

        seen: list[str] = []
        for mount in mounts:
            prefix = mount.prefix
            if not prefix.startswith("/") or prefix == "/" or prefix.endswith("/"):
                raise ValueError(f"route prefix must start with '/' and have no trailing '/': {prefix!r}")
            if prefix in seen:
                raise ValueError(f"duplicate route prefix: {prefix}")
            if not allow_nested_prefixes:
                for existing in seen:
                    if _prefixes_nest(existing, prefix) or _prefixes_nest(prefix, existing):
                        raise ValueError(f"route prefixes overlap: {existing} and {prefix}")
            seen.append(prefix)
        self._mounts: tuple[RouteMount, ...] = tuple(mounts)

    def __iter__(self) -> Iterator[RouteMount]:
        return iter(self._mounts)

    def __len__(self) -> int:
        return len(self._mounts)

    @property
    def prefixes(self) -> tuple[str, ...]:
        return tuple(mount.prefix for mount in self._mounts)

    def api_resolve_mount(self, path: str) -> RouteMount | None:
        """Return the first mount whose prefix matches a request path.

        Args:
            path: Request path.

        Returns:
            RouteMount | None: Matching mount in table order, or None.
        """

        for mount in self._mounts:
            if mount.matches(path):
                return mount
        return None

    def api_mount_into(self, application: FastAPI) -> None:
        """Register every route group's router on the application, in table order.

        A path under two nested prefixes belongs to the earlier mount only. Routes of a later
        group that fall under an earlier prefix are dropped, so they never answer even when the
        earlier group has no route for the path.

        Args:
            application: Application receiving the routers.

        Returns:
            None: Routers are registered as a side effect.
        """

        for index, mount in enumerate(self._mounts):
            earlier_mounts = self._mounts[:index]
            tags = [mount.name] if mount.name else None
            staged_router = APIRouter()
            staged_router.include_router(mount.route_group.api_create_router(), prefix=mount.prefix, tags=tags)

            owned_router = APIRouter()
            for route in staged_router.routes:
                route_path = getattr(route, "path", "")
                owner = next((earlier for earlier in earlier_mounts if earlier.matches(route_path)), None)
                if owner is not None:
                    logger.warning(
                        "Route %s of group %s is shadowed by earlier prefix %s",
                        route_path,
                        mount.name or "<unnamed>",
                        owner.prefix,
                    )
                    continue
                owned_router.routes.append(route)

            application.include_router(owned_router)
            logger.debug("Mounted route group %s at %s", mount.name or "<unnamed>", mount.prefix)


def api_build_route_mount_table(route_groups: Mapping[str, RouteGroupPort]) -> RouteMountTable:
    """Build the default mount table from route groups keyed by name.

    Args:
        route_groups: Route groups keyed by names from `ROUTE_GROUP_PREFIXES`.

    Returns:
        RouteMountTable: Table in the fixed default order. Groups that were not supplied are skipped.

    Raises:
        ValueError: Raised when a supplied group name has no registered prefix.
    """

    known_names = {name for name, _ in ROUTE_GROUP_PREFIXES}
    unknown_names = sorted(set(route_groups) - known_names)
    if unknown_names:
        raise ValueError(f"unknown route groups: {', '.join(unknown_names)}")

    mounts: list[RouteMount] = []
    for name, prefix in ROUTE_GROUP_PREFIXES:
        route_group = route_groups.get(name)
        if route_group is None:
            logger.warning("Route group %s not provided; %s is not mounted", name, prefix)
            continue
        mounts.append(RouteMount(prefix=prefix, route_group=route_group, name=name))
    return RouteMountTable(mounts)
