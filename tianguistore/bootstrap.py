"""Application bootstrap wiring for startup validation, dependency checks and serving.

Startup is a two-phase state machine. The process stays `NOT_SERVING` until
the data store answers one health query and the listener is bound; only then
does it move to `SERVING`. A failed check never binds a listener.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping

import uvicorn
from fastapi import FastAPI
from sqlalchemy import Engine

from tianguistore.api import create_api_application
from tianguistore.api.routers import RouteGroupPort, api_build_route_mount_table
from tianguistore.config import AppSettings, config_collect_warnings, config_load_settings
from tianguistore.db import DatabaseHealthPort, SQLAlchemyDatabaseHealthService, db_create_engine
from tianguistore.domain import StartupPhase
from tianguistore.observability import observability_configure_logging

logger = logging.getLogger(__name__)

ListenerBinder = Callable[[FastAPI, str, int, Callable[[], None]], None]
PhaseListener = Callable[[StartupPhase], None]
RouteGroupsFactory = Callable[[AppSettings, Engine], Mapping[str, RouteGroupPort]]


class DependencyUnavailableError(RuntimeError):
    """Raised when the startup data-store health check fails."""


class _ReadinessNotifyingServer(uvicorn.Server):
    """Uvicorn server that reports once its listening sockets are bound."""

    def __init__(self, config: uvicorn.Config, on_bound: Callable[[], None]):
        super().__init__(config)
        self._on_bound = on_bound

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            self._on_bound()


def bootstrap_serve_with_uvicorn(
    application: FastAPI,
    host: str,
    port: int,
    on_bound: Callable[[], None],
) -> None:
    """Bind the network listener and serve until shutdown.

    Args:
        application: Application to serve.
        host: Listen host.
        port: Listen port.
        on_bound: Called once the listening socket is bound.

    Returns:
        None: Blocks until the server stops.
    """

    config = uvicorn.Config(application, host=host, port=port, server_header=False, log_config=None)
    _ReadinessNotifyingServer(config, on_bound=on_bound).run()


class StartupSequencer:
    """Run the dependency check, then bind the listener, exactly once."""

    def __init__(
        self,
        settings: AppSettings,
        db_health_service: DatabaseHealthPort,
        application: FastAPI,
        listener_binder: ListenerBinder = bootstrap_serve_with_uvicorn,
    ):
        """Initialize the sequencer in the `NOT_SERVING` phase.

        Args:
            settings: Validated runtime settings.
            db_health_service: Health service used for the one-shot startup check.
            application: Application handed to the listener once the check passes.
            listener_binder: Callable that binds the listener and serves.

        Raises:
            ValueError: Raised when a dependency is None.
        """

        if settings is None:
            raise ValueError("settings must not be None")
        if db_health_service is None:
            raise ValueError("db_health_service must not be None")
        if application is None:
            raise ValueError("application must not be None")
        self._settings = settings
        self._db_health_service = db_health_service
        self._application = application
        self._listener_binder = listener_binder
        self._phase = StartupPhase.NOT_SERVING
        self._started = False
        self._phase_listeners: list[PhaseListener] = []

    @property
    def phase(self) -> StartupPhase:
        return self._phase

    def startup_add_phase_listener(self, listener: PhaseListener) -> None:
        """Register a callback notified when the process starts serving.

        Args:
            listener: Callable receiving the new phase.
        """

        self._phase_listeners.append(listener)

    def startup_check_dependency(self) -> None:
        """Run the one-shot data-store health check.

        Raises:
            DependencyUnavailableError: Raised when the data store cannot be reached.
        """

        target = self._db_health_service.db_connection_label()
        try:
            health = self._db_health_service.db_check_health()
        except ConnectionError as error:
            logger.error("Database unreachable at %s: %s", target, error, extra={"target": target})
            raise DependencyUnavailableError(f"database unreachable at {target}") from error
        logger.info("Database connected at %s: %s", target, health.detail, extra={"target": target})

    def startup_run(self) -> None:
        """Check the dependency, then bind the listener and serve.

        Returns:
            None: Returns when the listener stops serving.

        Raises:
            DependencyUnavailableError: Raised when the startup health check fails; no listener is bound.
            RuntimeError: Raised when the sequencer has already been run.
        """

        if self._started:
            raise RuntimeError("startup sequence has already run")
        self._started = True

        logger.info("Starting service in %s mode", self._settings.environment_name)
        self.startup_check_dependency()
        self._listener_binder(
            self._application,
            self._settings.application_host,
            self._settings.application_port,
            self._startup_mark_serving,
        )

    def _startup_mark_serving(self) -> None:
        if self._phase is StartupPhase.SERVING:
            return
        self._phase = StartupPhase.SERVING
        logger.info(
            "Server listening on http://%s:%s",
            self._settings.application_host,
            self._settings.application_port,
        )
        for listener in self._phase_listeners:
            listener(self._phase)


def bootstrap_load_route_groups(settings: AppSettings, engine: Engine) -> Mapping[str, RouteGroupPort]:
    """Load route groups from the configured `module:callable` factory.

    Args:
        settings: Validated runtime settings.
        engine: Shared data-store engine handed to the factory.

    Returns:
        Mapping[str, RouteGroupPort]: Route groups keyed by name, empty when no factory is configured.

    Raises:
        ValueError: Raised when the factory reference is malformed.
        ImportError: Raised when the factory module cannot be imported.
    """

    if settings.route_groups_factory is None:
        logger.warning("ROUTE_GROUPS_FACTORY is not set; no route groups are mounted")
        return {}

    module_name, separator, attribute_name = settings.route_groups_factory.partition(":")
    if not separator or not module_name or not attribute_name:
        raise ValueError("ROUTE_GROUPS_FACTORY must look like 'package.module:callable'")
    factory: RouteGroupsFactory = getattr(importlib.import_module(module_name), attribute_name)
    return factory(settings, engine)


def bootstrap_create_application(settings: AppSettings, engine: Engine) -> FastAPI:
    """Assemble the runtime application from validated settings.

    Args:
        settings: Validated runtime settings.
        engine: Shared data-store engine.

    Returns:
        FastAPI: Fully wired application.
    """

    route_mounts = api_build_route_mount_table(bootstrap_load_route_groups(settings, engine))
    return create_api_application(settings=settings, route_mounts=route_mounts)


def bootstrap_create_sequencer(settings: AppSettings | None = None) -> StartupSequencer:
    """Validate configuration and wire the startup sequencer.

    Args:
        settings: Pre-loaded settings, or None to load them from the environment.

    Returns:
        StartupSequencer: Sequencer in the `NOT_SERVING` phase.

    Raises:
        ConfigurationError: Raised when startup configuration validation fails.
    """

    settings = settings or config_load_settings()
    observability_configure_logging(settings.log_level, settings.log_format)
    for warning in config_collect_warnings(settings):
        logger.warning(warning)

    engine = db_create_engine(settings)
    return StartupSequencer(
        settings=settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        application=bootstrap_create_application(settings, engine),
    )
