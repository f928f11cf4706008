"""Shared pytest fixtures for the test suite."""

import asyncio
import logging
from datetime import datetime

import pytest

from nestmon.display.surface import DisplayState
from nestmon.lib.config.testing import set_settings
from nestmon.lib.exceptions import FetchError
from nestmon.lib.registry import DeviceDescriptor
from nestmon.nest.models import Reading


class StubFetcher:
    """Fetcher returning canned readings or raising canned errors per device."""

    def __init__(
        self,
        results: dict[int, Reading | Exception] | None = None,
        delays: dict[int, float] | None = None,
    ) -> None:
        self.results = results or {}
        self.delays = delays or {}
        self.calls: list[int] = []
        self.closed = False

    async def fetch(self, device: DeviceDescriptor) -> Reading:
        self.calls.append(device.id)
        delay = self.delays.get(device.id)
        if delay:
            await asyncio.sleep(delay)
        result = self.results.get(device.id)
        if result is None:
            raise FetchError(f"no stub result for {device.id}")
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self) -> None:
        self.closed = True


class RecordingSurface(DisplayState):
    """Display state that also records the order of every write."""

    def __init__(self, registry) -> None:
        super().__init__(registry)
        self.calls: list[tuple] = []

    def set_text(self, device_id, field, text, style=None):
        self.calls.append(("text", device_id, field, text))
        if style is None:
            super().set_text(device_id, field, text)
        else:
            super().set_text(device_id, field, text, style)

    def set_alert(self, device_id, active):
        self.calls.append(("alert", device_id, active))
        super().set_alert(device_id, active)

    def set_banner(self, text, state):
        self.calls.append(("banner", text, state))
        super().set_banner(text, state)


@pytest.fixture(autouse=True)
def configure_caplog(caplog):
    """Ensure caplog captures logs from the nestmon namespace."""
    caplog.set_level(logging.DEBUG, logger="nestmon")


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset global settings after each test to avoid cross-test pollution."""
    yield
    set_settings(None)


@pytest.fixture
def frozen_time():
    """Return a fixed local datetime for deterministic timestamps."""
    return datetime(2024, 6, 15, 21, 30, 5)


@pytest.fixture
def registry():
    """The three default nest units."""
    return (
        DeviceDescriptor(1, "192.168.1.100", "Nest 1"),
        DeviceDescriptor(2, "192.168.1.101", "Nest 2"),
        DeviceDescriptor(3, "192.168.1.102", "Nest 3"),
    )


@pytest.fixture
def display(registry):
    return DisplayState(registry)


@pytest.fixture
def recording_surface(registry):
    return RecordingSurface(registry)


@pytest.fixture
def sample_reading():
    return Reading(temperature=30.5, humidity=33.2, vibration_detected=True)


@pytest.fixture
def calm_reading():
    return Reading(temperature=29.1, humidity=35.0, vibration_detected=False)
