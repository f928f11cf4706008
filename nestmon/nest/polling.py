"""Poll the turtle nest sensors and keep the status display current.

Every nest unit is fetched once at startup, then every POLL_INTERVAL_MS
(3 seconds by default). Bringing the dashboard back to the foreground
triggers an immediate extra refresh.
"""

from typing import override

from rich.console import Console
from rich.logging import RichHandler

from nestmon.display.surface import DisplayState
from nestmon.lib.config import DisplayBackend, get_settings
from nestmon.lib.polling import PollingService
from nestmon.lib.registry import Registry, get_registry
from nestmon.logging import configure, get_logger
from nestmon.nest.cycle import run_cycle
from nestmon.nest.fetch import DeviceFetcher, create_fetcher
from nestmon.nest.models import CycleOutcome

logger = get_logger("nest.polling")


class NestPollingService(PollingService[CycleOutcome]):
    """Polling service for the nest sensor units."""

    def __init__(
        self,
        fetcher: DeviceFetcher,
        display: DisplayState,
        registry: Registry | None = None,
        interval_sec: float | None = None,
    ) -> None:
        super().__init__(name="Nests", interval_sec=interval_sec)
        self._fetcher = fetcher
        self._display = display
        self._registry = registry if registry is not None else get_registry()
        self.last_cycle: CycleOutcome | None = None

    @property
    def display(self) -> DisplayState:
        return self._display

    @property
    def registry(self) -> Registry:
        return self._registry

    @override
    async def initialize(self) -> None:
        """Log the registry being monitored."""
        logger.info(
            "Initializing turtle nest monitoring system: %s",
            ", ".join(f"{d.name} ({d.address})" for d in self._registry),
        )

    @override
    async def cleanup(self) -> None:
        """Close the device fetcher."""
        await self._fetcher.aclose()

    @override
    async def poll(self) -> CycleOutcome:
        """Fetch every nest and redraw the display."""
        cycle = await run_cycle(self._registry, self._fetcher, self._display)
        previous = self.last_cycle
        self.last_cycle = cycle
        if previous is None or previous.connected != cycle.connected:
            logger.info(
                "Connected to %d of %d devices", cycle.connected, cycle.total
            )
        return cycle


def _create_display(
    registry: Registry, console: Console | None = None
) -> DisplayState:
    """Create display based on configuration."""
    if get_settings().display_backend == DisplayBackend.LOG:
        from nestmon.lib.mock import MockDisplay

        return MockDisplay(registry)

    from nestmon.display.terminal import TerminalDisplay

    return TerminalDisplay(registry, console)


def main() -> None:
    """Main entry point for the polling service."""
    settings = get_settings()
    console = Console()

    if settings.display_backend == DisplayBackend.TERMINAL:
        # Log lines are printed above the live table instead of through it
        configure(
            settings.log_level,
            handler=RichHandler(console=console, show_path=False),
        )
    else:
        configure(settings.log_level)

    registry = get_registry()
    with _create_display(registry, console) as display:
        service = NestPollingService(create_fetcher(), display, registry)
        service.run()


if __name__ == "__main__":
    main()
