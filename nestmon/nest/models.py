"""Domain models for nest sensor readings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from nestmon.lib.config import PayloadKey
from nestmon.lib.exceptions import FetchError, MalformedPayloadError
from nestmon.lib.registry import DeviceDescriptor


def _as_number(value: Any) -> float | None:
    """Return value as a float if it is a JSON number, else None.

    Raises:
        MalformedPayloadError: If the number is not finite as a float.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    try:
        number = float(value)
    except OverflowError as e:
        raise MalformedPayloadError("Number out of range") from e
    if not math.isfinite(number):
        raise MalformedPayloadError(f"Non-finite number: {number}")
    return number


@dataclass(frozen=True, slots=True)
class Reading:
    """Latest sensor values reported by one nest unit."""

    temperature: float | None
    humidity: float | None
    vibration_detected: bool

    @classmethod
    def from_payload(cls, data: Any) -> Reading:
        """Build a reading from a decoded /data response body.

        Missing or non-numeric temperature and humidity are kept as None.
        Vibration is detected when either 'vibration' or 'motion' is truthy
        in Python terms, so empty lists and objects count as no vibration.

        Raises:
            MalformedPayloadError: If the body is not a JSON object, or a
                measure is a number that does not fit a finite float.
        """
        if not isinstance(data, dict):
            raise MalformedPayloadError(
                f"Expected JSON object, got {type(data).__name__}"
            )
        return cls(
            temperature=_as_number(data.get(PayloadKey.TEMPERATURE)),
            humidity=_as_number(data.get(PayloadKey.HUMIDITY)),
            vibration_detected=bool(
                data.get(PayloadKey.VIBRATION) or data.get(PayloadKey.MOTION)
            ),
        )


@dataclass(frozen=True, slots=True)
class DeviceOutcome:
    """Result of one fetch attempt: a reading, or the error that prevented it."""

    device: DeviceDescriptor
    reading: Reading | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.reading is not None


@dataclass(frozen=True, slots=True)
class CycleOutcome:
    """Per-device outcomes of one fetch cycle and its connected count."""

    outcomes: tuple[DeviceOutcome, ...]

    @property
    def connected(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def total(self) -> int:
        return len(self.outcomes)
