"""Mock device and display implementations for development.

Provides mock implementations of the fetcher and display interfaces that
work without nest hardware or a terminal. Used when MOCK_DEVICES=1 or
DISPLAY_BACKEND=log is set.
"""

import random

from nestmon.display.surface import (
    ConnectionState,
    DeviceField,
    DisplayState,
    Style,
)
from nestmon.lib.registry import DeviceDescriptor, Registry
from nestmon.logging import get_logger
from nestmon.nest.models import Reading

logger = get_logger("lib.mock")


class MockDeviceFetcher:
    """Mock fetcher that generates synthetic nest readings.

    - Temperature: uniform 28-34 °C
    - Humidity: uniform 25-40 %
    - Vibration: detected on 10% of readings
    """

    def __init__(self, vibration_chance: float = 0.1) -> None:
        self._vibration_chance = vibration_chance

    async def fetch(self, device: DeviceDescriptor) -> Reading:
        return Reading(
            temperature=28 + random.random() * 6,
            humidity=25 + random.random() * 15,
            vibration_detected=random.random() < self._vibration_chance,
        )

    async def aclose(self) -> None:
        """No-op for mock fetcher."""


class MockDisplay(DisplayState):
    """Display that logs every write instead of drawing it."""

    def __init__(self, registry: Registry) -> None:
        super().__init__(registry)
        logger.info("Mock display initialized with %d rows", len(self.rows))

    def set_text(
        self,
        device_id: int,
        field: DeviceField,
        text: str,
        style: Style = Style.NORMAL,
    ) -> None:
        super().set_text(device_id, field, text, style)
        logger.debug("[%s] %s = %s", self.row(device_id).device.name, field, text)

    def set_alert(self, device_id: int, active: bool) -> None:
        was_active = self.row(device_id).alert
        super().set_alert(device_id, active)
        if active and not was_active:
            logger.info("[%s] Vibration DETECTED", self.row(device_id).device.name)

    def set_banner(self, text: str, state: ConnectionState) -> None:
        super().set_banner(text, state)
        logger.info("[%s] %s", state.upper(), text)

    def close(self) -> None:
        logger.info("Mock display closed")
