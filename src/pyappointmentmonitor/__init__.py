"""pyAppointmentMonitor package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .client import Client
from .exceptions import (
    ConfigError,
    FetchError,
    LocationsNotFoundError,
    NetworkError,
    ProviderError,
    PublishError,
    ValidationError,
)
from .models import AvailableSlot, ClassifiedSlots, Location, PublisherInfo, SlotAvailability
from .monitor import Monitor, MonitorState, next_delay
from .service import TtpService, resolve_locations
from .slots import classify_slots, format_notification

try:
    __version__ = version("pyappointmentmonitor")
except PackageNotFoundError:  # pragma: no cover - not installed
    __version__ = "0.0.0"

__all__ = [
    "AvailableSlot",
    "ClassifiedSlots",
    "Client",
    "ConfigError",
    "FetchError",
    "Location",
    "LocationsNotFoundError",
    "Monitor",
    "MonitorState",
    "NetworkError",
    "ProviderError",
    "PublishError",
    "PublisherInfo",
    "SlotAvailability",
    "TtpService",
    "ValidationError",
    "__version__",
    "classify_slots",
    "format_notification",
    "next_delay",
    "resolve_locations",
]
