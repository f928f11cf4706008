"""Custom exceptions for the Nest Monitor application.

Provides a hierarchy of domain-specific exceptions. Fetch errors are
recoverable per device; display errors are integration defects and are
left to propagate.
"""


class NestMonitorError(Exception):
    """Base exception for all application errors."""


class FetchError(NestMonitorError):
    """Base exception for a failed device fetch."""


class TransportError(FetchError):
    """Raised when a device is unreachable (timeout, DNS, refused)."""


class HttpStatusError(FetchError):
    """Raised when a device answers with a non-success HTTP status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class MalformedPayloadError(FetchError):
    """Raised when a device response body is not a JSON object."""


class DisplayError(NestMonitorError):
    """Base exception for display surface errors."""


class UnknownDeviceError(DisplayError, KeyError):
    """Raised when a display write targets a device with no row."""

    def __init__(self, device_id: int) -> None:
        super().__init__(f"No display row for device {device_id}")
        self.device_id = device_id

    def __str__(self) -> str:
        return str(self.args[0])
