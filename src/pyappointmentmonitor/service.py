"""Scheduler API client and location resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from .const import (
    DEFAULT_ENDPOINT,
    LOCATION_ID_PARAM,
    LOCATIONS_ENDPOINT,
    SLOT_AVAILABILITY_ENDPOINT,
)
from .exceptions import LocationsNotFoundError, ProviderError, ValidationError
from .http import HttpClient
from .models import AvailableSlot, Location, LocationService, SlotAvailability
from .util import parse_local_timestamp

_LOGGER = logging.getLogger(__name__)


class TtpService:
    """Read-only client for the appointment scheduler API."""

    def __init__(self, http: HttpClient, *, endpoint: str | None = None) -> None:
        self._http = http
        self._endpoint = self._normalize_endpoint(endpoint)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch_locations(self) -> list[Location]:
        """Return every location known to the scheduler."""
        data = await self._http.get_json(self._build_url(LOCATIONS_ENDPOINT))
        locations = self._map_location_list(data)
        _LOGGER.debug("Fetched %s locations from %s", len(locations), self._endpoint)
        return locations

    async def fetch_slot_availability(self, location_id: int) -> SlotAvailability:
        """Return the current slot availability for one location."""
        if isinstance(location_id, bool) or not isinstance(location_id, int):
            raise ValidationError("location_id must be an integer.")
        data = await self._http.get_json(
            self._build_url(SLOT_AVAILABILITY_ENDPOINT),
            params={LOCATION_ID_PARAM: location_id},
        )
        return self._map_slot_availability(data)

    def _build_url(self, api: str) -> str:
        return f"{self._endpoint}/{api}/"

    def _normalize_endpoint(self, endpoint: str | None) -> str:
        if endpoint is None:
            return DEFAULT_ENDPOINT
        if not isinstance(endpoint, str) or not endpoint.strip():
            raise ValidationError("endpoint must be a non-empty string.")
        return endpoint.strip().rstrip("/")

    def _map_location_list(self, data: Any) -> list[Location]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise ProviderError("Scheduler response included invalid locations.")
        locations: list[Location] = []
        for item in data:
            if not isinstance(item, dict):
                continue
            locations.append(self._map_location(item))
        return locations

    def _map_location(self, data: dict[str, Any]) -> Location:
        location_id = self._coerce_id(data.get("id"), "location id")
        return Location(
            id=location_id,
            name=self._str(data.get("name")),
            short_name=self._str(data.get("shortName")),
            location_type=self._str(data.get("locationType")),
            location_code=self._str(data.get("locationCode")),
            address=self._str(data.get("address")),
            address_additional=self._str(data.get("addressAdditional")),
            city=self._str(data.get("city")),
            state=self._str(data.get("state")),
            postal_code=self._str(data.get("postalCode")),
            country_code=self._str(data.get("countryCode")),
            tz_data=self._str(data.get("tzData")),
            temporary=data.get("temporary") is True,
            invite_only=data.get("inviteOnly") is True,
            operational=data.get("operational") is True,
            services=self._map_services(data.get("services")),
        )

    def _map_services(self, raw: Any) -> tuple[LocationService, ...]:
        if not isinstance(raw, list):
            return ()
        services: list[LocationService] = []
        for item in raw:
            if not isinstance(item, dict) or item.get("id") is None:
                continue
            services.append(
                LocationService(
                    id=self._coerce_id(item.get("id"), "service id"),
                    name=self._str(item.get("name")),
                )
            )
        return tuple(services)

    def _map_slot_availability(self, data: Any) -> SlotAvailability:
        if not isinstance(data, dict):
            raise ProviderError("Scheduler response included invalid slot availability.")
        raw_slots = data.get("availableSlots")
        if raw_slots is None:
            raw_slots = []
        if not isinstance(raw_slots, list):
            raise ProviderError("Scheduler response included invalid available slots.")
        slots = [self._map_slot(item) for item in raw_slots if isinstance(item, dict)]
        last_published = data.get("lastPublishedDate")
        return SlotAvailability(
            available_slots=slots,
            last_published_date=(
                self._timestamp(last_published, "lastPublishedDate")
                if last_published is not None
                else None
            ),
        )

    def _map_slot(self, data: dict[str, Any]) -> AvailableSlot:
        start_raw = data.get("startTimestamp")
        end_raw = data.get("endTimestamp")
        if start_raw is None or end_raw is None:
            raise ProviderError("Scheduler response missing slot timestamps.")
        return AvailableSlot(
            location_id=self._coerce_id(data.get("locationId"), "slot location id"),
            start_timestamp=self._timestamp(start_raw, "startTimestamp"),
            end_timestamp=self._timestamp(end_raw, "endTimestamp"),
            active=data.get("active") is True,
            duration=self._parse_int(data.get("duration")),
            remote_ind=data.get("remoteInd") is True,
        )

    def _timestamp(self, value: Any, field: str) -> datetime:
        try:
            return parse_local_timestamp(value)
        except ValidationError as exc:
            raise ProviderError(f"Scheduler returned invalid {field}.") from exc

    def _coerce_id(self, value: Any, field: str) -> int:
        if value is None or isinstance(value, bool):
            raise ProviderError(f"Scheduler response missing {field}.")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ProviderError(f"Scheduler response included invalid {field}.") from exc

    def _str(self, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    def _parse_int(self, value: Any) -> int:
        if value is None or isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return 0
        return 0


def resolve_locations(
    requested_ids: Iterable[int],
    known: Iterable[Location],
) -> dict[int, Location]:
    """Return the requested locations keyed by id, ordered by id.

    Raises LocationsNotFoundError listing every requested id the scheduler
    does not know about.
    """
    requested = set(requested_ids)
    if not requested:
        raise ValidationError("At least one location id is required.")
    known_by_id = {location.id: location for location in known}
    missing = requested.difference(known_by_id)
    if missing:
        raise LocationsNotFoundError(missing)
    return {location_id: known_by_id[location_id] for location_id in sorted(requested)}
