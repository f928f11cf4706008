"""Enumerations for the Nest Monitor application."""

from enum import StrEnum


class DisplayBackend(StrEnum):
    TERMINAL = "terminal"
    LOG = "log"


class Unit(StrEnum):
    """Measurement units for sensor readings."""

    CELSIUS = "°C"
    PERCENT = "%"


class PayloadKey(StrEnum):
    """Keys read from a device's /data JSON object."""

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    VIBRATION = "vibration"
    MOTION = "motion"
