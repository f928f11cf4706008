"""Generic async polling service abstraction.

Provides a reusable base class for services that run one poll cycle
immediately, then on a fixed interval, with extra out-of-band cycles
when the viewer comes back to the display.
"""

import asyncio
import signal
from abc import ABC, abstractmethod
from contextlib import suppress

from nestmon.lib.config import get_settings
from nestmon.logging import get_logger

logger = get_logger("lib.polling")


class PollingService[T](ABC):
    """Abstract base class for async polling services.

    Implements the common polling loop pattern with:
    - Configurable polling interval on a fixed-rate schedule
    - Out-of-band cycles on demand (visibility regained)
    - Graceful shutdown handling
    - Error recovery
    """

    def __init__(
        self,
        name: str,
        interval_sec: float | None = None,
    ) -> None:
        """Initialize the polling service.

        Args:
            name: Service name for logging.
            interval_sec: Polling interval in seconds.
        """
        self.name = name
        polling_cfg = get_settings().polling
        self.interval_sec = interval_sec or polling_cfg.interval_sec
        self._stop_event = asyncio.Event()
        self._hidden = False
        self._next_run: float | None = None
        self._cycle_tasks: set[asyncio.Task[None]] = set()
        self._logger = get_logger(f"polling.{name}")

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize any resources needed before polling starts.

        Called once at the start of run(). Should open clients, start
        displays, etc.
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources before exit.

        Called once when the polling loop exits. Should close clients,
        release displays, etc.
        """

    @abstractmethod
    async def poll(self) -> T:
        """Run one poll cycle and return its result."""

    def on_poll_error(self, error: Exception) -> None:
        """Handle an error that escaped a poll cycle.

        Override to customize error handling. Default logs the error.
        """
        self._logger.error("%s poll error: %s", self.name, error, exc_info=error)

    @property
    def next_run_at(self) -> float | None:
        """Event loop time of the next timer-driven cycle."""
        return self._next_run

    @property
    def hidden(self) -> bool:
        return self._hidden

    async def _poll_cycle(self) -> None:
        """Execute a single poll cycle, containing any error it raises."""
        try:
            await self.poll()
        except Exception as e:
            self.on_poll_error(e)

    def _start_cycle(self) -> asyncio.Task[None]:
        task = asyncio.create_task(self._poll_cycle())
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)
        return task

    def trigger(self) -> asyncio.Task[None]:
        """Start one extra poll cycle now, leaving the timer untouched."""
        return self._start_cycle()

    def visibility_changed(self, hidden: bool) -> None:
        """Record a visibility change of the display.

        A hidden to visible transition triggers one extra poll cycle.
        Polling is not paused while hidden.
        """
        was_hidden = self._hidden
        self._hidden = hidden
        if was_hidden and not hidden:
            self._logger.info("Display visible again, refreshing %s", self.name)
            self.trigger()

    def stop(self) -> None:
        """Request the polling loop to exit, cancelling cycles still in flight."""
        self._stop_event.set()

    def _handle_shutdown(self, sig: signal.Signals) -> None:
        """Handle shutdown signals gracefully."""
        self._logger.info("Received %s, initiating graceful shutdown...", sig.name)
        self.stop()

    def _handle_resume(self) -> None:
        """Treat SIGCONT as the terminal coming back to the foreground."""
        # SIGCONT is only delivered after the process was stopped
        self.visibility_changed(hidden=True)
        self.visibility_changed(hidden=False)

    def _setup_signal_handlers(self) -> None:
        """Register signal handlers for shutdown and resume."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self._handle_shutdown, sig)
        loop.add_signal_handler(signal.SIGCONT, self._handle_resume)

    async def _cancel_cycle_tasks(self) -> None:
        for task in list(self._cycle_tasks):
            task.cancel()
        for task in list(self._cycle_tasks):
            with suppress(asyncio.CancelledError):
                await task

    async def run_async(self) -> None:
        """Run the polling loop until stop() is called.

        The first cycle runs immediately; following cycles start every
        interval_sec. Each cycle runs as its own task, so a cycle slower
        than the interval overlaps the next one instead of delaying it.
        """
        await self.initialize()
        self._logger.info(
            "%s polling service started (every %.1fs)",
            self.name,
            self.interval_sec,
        )

        loop = asyncio.get_running_loop()
        self._next_run = loop.time()

        try:
            while not self._stop_event.is_set():
                self._start_cycle()

                self._next_run += self.interval_sec
                # Ticks missed while the event loop was blocked are dropped
                now = loop.time()
                if self._next_run < now:
                    self._next_run = now

                with suppress(TimeoutError):
                    await asyncio.wait_for(
                        self._stop_event.wait(), self._next_run - now
                    )
        finally:
            self._logger.info("Cleaning up resources...")
            await self._cancel_cycle_tasks()
            await self.cleanup()
            self._logger.info("%s shutdown complete", self.name)

    async def _main(self) -> None:
        self._setup_signal_handlers()
        await self.run_async()

    def run(self) -> None:
        """Run the polling loop.

        This is the main entry point. It:
        1. Sets up signal handlers for shutdown and resume
        2. Calls initialize()
        3. Enters the polling loop
        4. Calls cleanup() on exit
        """
        asyncio.run(self._main())
