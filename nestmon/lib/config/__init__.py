"""Centralized configuration for the Nest Monitor application.

This package provides:
- Enums for display backends, units and payload keys
- Pydantic settings models for configuration
"""

from .enums import DisplayBackend, PayloadKey, Unit
from .settings import (
    DATA_PATH,
    DEFAULT_DEVICES,
    DeviceSettings,
    FetchSettings,
    PollingSettings,
    ServerSettings,
    Settings,
    get_settings,
)

__all__ = [
    # Enums
    "DisplayBackend",
    "PayloadKey",
    "Unit",
    # Settings models
    "DeviceSettings",
    "FetchSettings",
    "PollingSettings",
    "ServerSettings",
    "Settings",
    # Constants
    "DATA_PATH",
    "DEFAULT_DEVICES",
    # Functions
    "get_settings",
]
