"""Display surface abstraction for the nest status table.

The renderers only write through the DisplaySurface protocol: per-device
text fields, a per-device alert highlight, and one connectivity banner.
DisplayState is the in-memory implementation; the terminal and log
displays build on it.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, Self

from nestmon.lib.exceptions import UnknownDeviceError
from nestmon.lib.registry import DeviceDescriptor, Registry

PLACEHOLDER = "--"
CONNECTING = "Connecting to nest sensors..."


class DeviceField(StrEnum):
    """Addressable text fields of a device row."""

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    VIBRATION = "vibration"
    STATUS = "status"
    LAST_UPDATE = "last_update"


class Style(StrEnum):
    NORMAL = "normal"
    EMPHASIS = "emphasis"  # vibration detected
    SUCCESS = "success"
    DANGER = "danger"


class ConnectionState(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"


class DisplaySurface(Protocol):
    """Protocol for anything the renderers can draw on."""

    def set_text(
        self,
        device_id: int,
        field: DeviceField,
        text: str,
        style: Style = Style.NORMAL,
    ) -> None: ...

    def set_alert(self, device_id: int, active: bool) -> None: ...

    def set_banner(self, text: str, state: ConnectionState) -> None: ...


@dataclass(slots=True)
class Cell:
    text: str = PLACEHOLDER
    style: Style = Style.NORMAL


def _empty_cells() -> dict[DeviceField, Cell]:
    return {f: Cell() for f in DeviceField}


@dataclass(slots=True)
class DeviceRow:
    """Rendered state of one device."""

    device: DeviceDescriptor
    cells: dict[DeviceField, Cell] = field(default_factory=_empty_cells)
    alert: bool = False

    def text(self, field: DeviceField) -> str:
        return self.cells[field].text

    def style(self, field: DeviceField) -> Style:
        return self.cells[field].style

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.device.id,
            "name": self.device.name,
            "address": self.device.address,
            "alert": self.alert,
            "fields": {
                f.value: {"text": c.text, "style": c.style.value}
                for f, c in self.cells.items()
            },
        }


@dataclass(slots=True)
class Banner:
    text: str = CONNECTING
    state: ConnectionState = ConnectionState.OFFLINE


class DisplayState:
    """In-memory display surface holding one row per registered device."""

    def __init__(self, registry: Registry) -> None:
        self._rows = {device.id: DeviceRow(device) for device in registry}
        self.banner = Banner()

    @property
    def rows(self) -> list[DeviceRow]:
        """Rows in registry order."""
        return list(self._rows.values())

    def row(self, device_id: int) -> DeviceRow:
        """Get the row of a device.

        Raises:
            UnknownDeviceError: If the device has no row.
        """
        try:
            return self._rows[device_id]
        except KeyError:
            raise UnknownDeviceError(device_id) from None

    def set_text(
        self,
        device_id: int,
        field: DeviceField,
        text: str,
        style: Style = Style.NORMAL,
    ) -> None:
        cell = self.row(device_id).cells[field]
        cell.text = text
        cell.style = style

    def set_alert(self, device_id: int, active: bool) -> None:
        self.row(device_id).alert = active

    def set_banner(self, text: str, state: ConnectionState) -> None:
        self.banner.text = text
        self.banner.state = state

    def snapshot(self) -> dict[str, Any]:
        """Return the displayed state as JSON-serializable data."""
        return {
            "connection": {
                "state": self.banner.state.value,
                "text": self.banner.text,
            },
            "devices": [row.to_dict() for row in self.rows],
        }

    def start(self) -> None:
        """Start drawing. No-op for the in-memory state."""

    def close(self) -> None:
        """Stop drawing. No-op for the in-memory state."""

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
