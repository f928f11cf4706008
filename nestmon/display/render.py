"""Render readings and connectivity onto a display surface."""

from datetime import datetime

from nestmon.display.surface import (
    CONNECTING,
    PLACEHOLDER,
    ConnectionState,
    DeviceField,
    DisplaySurface,
    Style,
)
from nestmon.nest.models import Reading

STATUS_ACTIVE = "✅ Active"
STATUS_OFFLINE = "❌ Offline"
VIBRATION_DETECTED = "DETECTED"
VIBRATION_NONE = "None"
CONNECTION_LOST = "Connection lost"


def format_measure(value: float | None) -> str:
    """Format a measure with one decimal, or the placeholder when unset."""
    # 0.0 is what the firmware reports before its first sample
    return f"{value:.1f}" if value else PLACEHOLDER


def update_device_display(
    surface: DisplaySurface,
    device_id: int,
    reading: Reading | None,
    *,
    now: datetime | None = None,
) -> None:
    """Render a device's latest reading, or its offline state when None."""
    if reading is None:
        surface.set_text(device_id, DeviceField.TEMPERATURE, PLACEHOLDER)
        surface.set_text(device_id, DeviceField.HUMIDITY, PLACEHOLDER)
        surface.set_text(device_id, DeviceField.VIBRATION, PLACEHOLDER)
        surface.set_text(
            device_id, DeviceField.STATUS, STATUS_OFFLINE, Style.DANGER
        )
        surface.set_text(device_id, DeviceField.LAST_UPDATE, CONNECTION_LOST)
        surface.set_alert(device_id, False)
        return

    surface.set_text(
        device_id, DeviceField.TEMPERATURE, format_measure(reading.temperature)
    )
    surface.set_text(
        device_id, DeviceField.HUMIDITY, format_measure(reading.humidity)
    )

    if reading.vibration_detected:
        surface.set_text(
            device_id, DeviceField.VIBRATION, VIBRATION_DETECTED, Style.EMPHASIS
        )
    else:
        surface.set_text(device_id, DeviceField.VIBRATION, VIBRATION_NONE)
    surface.set_alert(device_id, reading.vibration_detected)

    surface.set_text(device_id, DeviceField.STATUS, STATUS_ACTIVE, Style.SUCCESS)
    timestamp = (now or datetime.now()).strftime("%H:%M:%S")
    surface.set_text(device_id, DeviceField.LAST_UPDATE, timestamp)


def update_connection_status(
    surface: DisplaySurface, connected: int, total: int
) -> None:
    """Render the aggregate connectivity banner."""
    if connected > 0:
        surface.set_banner(
            f"Connected to {connected} of {total} devices",
            ConnectionState.ONLINE,
        )
    else:
        surface.set_banner(CONNECTING, ConnectionState.OFFLINE)
