"""Static registry of the nest sensor devices."""

from dataclasses import dataclass

from nestmon.lib.config import get_settings


@dataclass(frozen=True, slots=True)
class DeviceDescriptor:
    """A nest sensor unit reachable over HTTP."""

    id: int
    address: str
    name: str


type Registry = tuple[DeviceDescriptor, ...]


def get_registry() -> Registry:
    """Build the ordered device registry from settings."""
    return tuple(
        DeviceDescriptor(id=d.id, address=d.address, name=d.name)
        for d in get_settings().nest_devices
    )
