"""Application factory for the status API."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.routing import Route

from nestmon.display.surface import DisplayState
from nestmon.lib.config import DisplayBackend, get_settings
from nestmon.lib.registry import get_registry
from nestmon.logging import configure, get_logger
from nestmon.nest.fetch import create_fetcher
from nestmon.nest.polling import NestPollingService

from .api.health import health_check
from .api.status import get_status
from .api.visibility import update_visibility

_logger = get_logger("server.entrypoint")


def _create_service() -> NestPollingService:
    """Create a polling service drawing on an in-memory display."""
    registry = get_registry()
    display: DisplayState
    if get_settings().display_backend == DisplayBackend.LOG:
        from nestmon.lib.mock import MockDisplay

        display = MockDisplay(registry)
    else:
        display = DisplayState(registry)
    return NestPollingService(create_fetcher(), display, registry)


def create_app(service: NestPollingService | None = None) -> Starlette:
    """Create and configure the Starlette application.

    The polling service runs as a background task for the lifetime of the
    application; the endpoints read its display state and last cycle.

    Args:
        service: Polling service to run. Built from settings when omitted.

    Returns:
        Configured Starlette application instance.
    """
    configure(get_settings().log_level)
    service = service or _create_service()

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        """Run the polling loop alongside the web server."""
        polling_task = asyncio.create_task(service.run_async())
        _logger.info("Nest polling started")

        try:
            yield
        finally:
            service.stop()
            await polling_task
            _logger.info("Nest polling stopped")

    routes = [
        Route("/health", health_check),
        Route("/api/status", get_status),
        Route("/api/visibility", update_visibility, methods=["POST"]),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.service = service
    return app
