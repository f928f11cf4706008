"""Fetch the latest reading from a nest sensor unit over HTTP.

Each unit serves its current values as a JSON object on ``/data``. A fetch
is a single time-bounded GET with no retry; every failure is mapped onto
one of the FetchError subclasses.
"""

import asyncio
import json
from typing import Any, Protocol, Self

import httpx

from nestmon.lib.config import get_settings
from nestmon.lib.exceptions import (
    FetchError,
    HttpStatusError,
    MalformedPayloadError,
    TransportError,
)
from nestmon.lib.registry import DeviceDescriptor
from nestmon.logging import get_logger
from nestmon.nest.models import DeviceOutcome, Reading

logger = get_logger("nest.fetch")


def _reject_constant(name: str) -> Any:
    """Refuse the NaN and Infinity literals that strict JSON does not allow."""
    raise ValueError(f"Non-standard constant {name}")


class DeviceFetcher(Protocol):
    """Protocol for per-device reading sources."""

    async def fetch(self, device: DeviceDescriptor) -> Reading: ...

    async def aclose(self) -> None: ...


class HttpDeviceFetcher:
    """Fetch readings from nest units with a shared async HTTP client."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout_sec: float | None = None,
        path: str | None = None,
    ) -> None:
        cfg = get_settings().fetch
        self._timeout_sec = timeout_sec or cfg.timeout_sec
        self._path = path or cfg.path
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout_sec),
            follow_redirects=True,
        )

    def url_for(self, device: DeviceDescriptor) -> str:
        """Return the data URL of a device."""
        return f"http://{device.address}{self._path}"

    async def fetch(self, device: DeviceDescriptor) -> Reading:
        """Fetch and parse the current reading of a device.

        Raises:
            TransportError: If the device cannot be reached in time.
            HttpStatusError: If the device answers with a non-2xx status.
            MalformedPayloadError: If the body is not a JSON object.
        """
        url = self.url_for(device)
        try:
            async with asyncio.timeout(self._timeout_sec):
                response = await self._client.get(url)
        except TimeoutError as e:
            raise TransportError(
                f"Timed out after {self._timeout_sec}s fetching {url}"
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise TransportError(f"{type(e).__name__} fetching {url}: {e}") from e

        if not response.is_success:
            raise HttpStatusError(response.status_code)

        try:
            data = json.loads(
                response.content, parse_constant=_reject_constant
            )
        except ValueError as e:
            raise MalformedPayloadError(f"Invalid JSON from {url}: {e}") from e

        return Reading.from_payload(data)

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()


async def fetch_device(
    fetcher: DeviceFetcher, device: DeviceDescriptor
) -> DeviceOutcome:
    """Fetch one device, turning any fetch failure into an offline outcome."""
    try:
        reading = await fetcher.fetch(device)
    except FetchError as e:
        logger.warning("Error fetching data from %s: %s", device.name, e)
        return DeviceOutcome(device, error=e)

    logger.debug("Read %s: %s", device.name, reading)
    return DeviceOutcome(device, reading=reading)


def create_fetcher() -> DeviceFetcher:
    """Create fetcher based on configuration."""
    if get_settings().mock_devices:
        from nestmon.lib.mock import MockDeviceFetcher

        logger.info("Using mock device fetcher (demo mode)")
        return MockDeviceFetcher()
    return HttpDeviceFetcher()
