"""Public data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class LocationService:
    id: int
    name: str


@dataclass(frozen=True, slots=True)
class Location:
    id: int
    name: str
    short_name: str
    location_type: str = ""
    location_code: str = ""
    address: str = ""
    address_additional: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country_code: str = ""
    tz_data: str = ""
    temporary: bool = False
    invite_only: bool = False
    operational: bool = False
    services: tuple[LocationService, ...] = ()

    @property
    def simple_name(self) -> str:
        label = self.short_name.strip() or self.name.strip()
        return f"{label} ({self.id})"


@dataclass(frozen=True, slots=True)
class AvailableSlot:
    location_id: int
    start_timestamp: datetime
    end_timestamp: datetime
    active: bool
    duration: int
    remote_ind: bool = False


@dataclass(frozen=True, slots=True)
class SlotAvailability:
    available_slots: list[AvailableSlot]
    last_published_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class ClassifiedSlots:
    inactive: list[AvailableSlot] = field(default_factory=list)
    ineligible: list[AvailableSlot] = field(default_factory=list)
    eligible: list[AvailableSlot] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PublisherInfo:
    id: str
    requires_payload: bool


@dataclass(frozen=True, slots=True)
class CheckResult:
    location: Location
    found: bool
    error: Exception | None = None
