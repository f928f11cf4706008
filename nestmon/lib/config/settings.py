"""Settings models and configuration loading for the Nest Monitor application."""

from functools import cached_property, lru_cache
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from nestmon.lib.config.enums import DisplayBackend

# Path served by the sensor firmware on every nest unit
DATA_PATH = "/data"


def _parse_bool(v: Any) -> bool:
    """Parse boolean from string '1'/'0' or actual bool."""
    if isinstance(v, bool):
        return v
    if isinstance(v, str):
        return v == "1"
    return bool(v)


_BoolFromStr = Annotated[bool, BeforeValidator(_parse_bool)]


class DeviceSettings(BaseModel):
    """One entry of the static device registry."""

    model_config = ConfigDict(frozen=True)

    id: int
    address: str = Field(min_length=1)
    name: str


DEFAULT_DEVICES = (
    DeviceSettings(id=1, address="192.168.1.100", name="Nest 1"),
    DeviceSettings(id=2, address="192.168.1.101", name="Nest 2"),
    DeviceSettings(id=3, address="192.168.1.102", name="Nest 3"),
)


class PollingSettings(BaseModel):
    """Polling service settings."""

    model_config = ConfigDict(frozen=True)

    interval_ms: int = 3000

    @property
    def interval_sec(self) -> float:
        """Polling interval in seconds."""
        return self.interval_ms / 1000


class FetchSettings(BaseModel):
    """Device HTTP fetch settings."""

    model_config = ConfigDict(frozen=True)

    timeout_sec: float = 5.0
    path: str = DATA_PATH


class ServerSettings(BaseModel):
    """Status API server settings."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 5000


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Devices (JSON list in NEST_DEVICES)
    nest_devices: list[DeviceSettings] = Field(
        default_factory=lambda: list(DEFAULT_DEVICES)
    )
    mock_devices: _BoolFromStr = False

    # Polling
    poll_interval_ms: int = Field(default=3000, gt=0)
    request_timeout_sec: float = Field(default=5.0, gt=0)

    # Display
    display_backend: DisplayBackend = DisplayBackend.TERMINAL

    # Status API
    server_host: str = "0.0.0.0"
    server_port: int = Field(default=5000, gt=0, le=65535)

    log_level: str = "INFO"

    @cached_property
    def polling(self) -> PollingSettings:
        """Get polling settings."""
        return PollingSettings(interval_ms=self.poll_interval_ms)

    @cached_property
    def fetch(self) -> FetchSettings:
        """Get device fetch settings."""
        return FetchSettings(timeout_sec=self.request_timeout_sec)

    @cached_property
    def server(self) -> ServerSettings:
        """Get status API settings."""
        return ServerSettings(host=self.server_host, port=self.server_port)

    @model_validator(mode="after")
    def validate_settings(self) -> Self:
        """Validate cross-field configuration constraints."""
        errors: list[str] = []

        if not self.nest_devices:
            errors.append("NEST_DEVICES must list at least one device")

        seen: set[int] = set()
        for device in self.nest_devices:
            if device.id in seen:
                errors.append(f"NEST_DEVICES has duplicate id {device.id}")
            seen.add(device.id)

        if errors:
            raise ValueError(
                "Configuration validation failed:\n  - "
                + "\n  - ".join(errors)
            )

        return self


# Settings override for testing - allows injecting custom Settings without
# modifying environment variables or clearing the lru_cache.
_settings_override: Settings | None = None


@lru_cache(maxsize=1)
def _load_settings() -> Settings:
    """Load settings from environment (cached)."""
    return Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    Returns the test override if set, otherwise loads from environment
    variables (cached after first load). For testing, use set_settings()
    from nestmon.lib.config.testing to override.
    """
    if _settings_override is not None:
        return _settings_override
    return _load_settings()
