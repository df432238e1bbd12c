"""Polling loop that checks monitored locations and publishes eligible slots."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .exceptions import FetchError
from .models import CheckResult, Location
from .publisher.base import BasePublisher
from .publisher.registry import dispatch
from .service import TtpService
from .slots import classify_slots, format_notification

_LOGGER = logging.getLogger(__name__)

DEFAULT_POLL_PERIOD = 30.0
DEFAULT_PUBLISH_TO = ("Log",)
# Aggregated "no slots" log is only emitted above this many slot-free locations.
NO_SLOTS_LOG_THRESHOLD = 1


class MonitorState(Enum):
    POLLING = "polling"
    BACKING_OFF = "backing_off"


def next_delay(found_any: bool, poll_period: float, backoff_period: float | None) -> float:
    """Return the seconds to wait before the next cycle."""
    if found_any:
        return backoff_period if backoff_period is not None else poll_period
    return poll_period


@dataclass
class Monitor:
    """Checks every location once per cycle until the stop event is set."""

    service: TtpService
    publishers: Mapping[str, BasePublisher]
    locations: Mapping[int, Location]
    publish_to: Sequence[str] = DEFAULT_PUBLISH_TO
    before: datetime = datetime.max
    poll_period: float = DEFAULT_POLL_PERIOD
    backoff_period: float | None = None
    state: MonitorState = MonitorState.POLLING
    cycles: int = 0
    published: int = 0
    last_delay: float | None = None
    _pending: set[asyncio.Task[int]] = field(default_factory=set, repr=False)

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        stop = stop_event or asyncio.Event()
        _LOGGER.info(
            "Monitoring %s for slots before %s",
            ", ".join(location.simple_name for location in self.locations.values()),
            self.before,
        )
        try:
            while not stop.is_set():
                delay = await self.run_cycle(stop)
                if stop.is_set():
                    break
                _LOGGER.info("Sleeping for %.0f seconds before checking again...", delay)
                await self._sleep(delay, stop)
        finally:
            await self.drain()
        _LOGGER.info("Exiting!")

    async def run_cycle(self, stop_event: asyncio.Event | None = None) -> float:
        """Check all locations concurrently and return the next delay."""
        self.cycles += 1
        results = await asyncio.gather(
            *(self.check_location(location, stop_event) for location in self.locations.values())
        )
        checked = [result for result in results if result is not None]
        not_found = [result.location for result in checked if not result.found]
        if len(not_found) > NO_SLOTS_LOG_THRESHOLD:
            _LOGGER.info(
                "No slots found for %s",
                ", ".join(location.simple_name for location in not_found),
            )
        found_any = any(result.found for result in checked)
        self.state = MonitorState.BACKING_OFF if found_any else MonitorState.POLLING
        self.last_delay = next_delay(found_any, self.poll_period, self.backoff_period)
        return self.last_delay

    async def check_location(
        self,
        location: Location,
        stop_event: asyncio.Event | None = None,
    ) -> CheckResult | None:
        """Check one location; returns None when skipped because of a stop request."""
        if stop_event is not None and stop_event.is_set():
            return None
        try:
            availability = await self.service.fetch_slot_availability(location.id)
        except FetchError as exc:
            _LOGGER.warning("Failed to check slots for %s: %s", location.simple_name, exc)
            return CheckResult(location=location, found=False, error=exc)
        except Exception as exc:  # noqa: BLE001
            _LOGGER.exception("Unexpected error checking slots for %s", location.simple_name)
            return CheckResult(location=location, found=False, error=exc)

        _LOGGER.debug(
            "SlotAvailability retrieved for %s: %s",
            location.simple_name,
            availability,
        )
        classified = classify_slots(availability.available_slots, self.before)
        for slot in classified.ineligible:
            _LOGGER.info(
                "Slot available at %s, but after requested date of %s: %s",
                location.simple_name,
                self.before,
                slot.start_timestamp,
            )
        if not classified.eligible:
            return CheckResult(location=location, found=False)

        message = format_notification(
            [slot.start_timestamp for slot in classified.eligible],
            location.simple_name,
        )
        self._spawn_dispatch(location, message)
        return CheckResult(location=location, found=True)

    async def drain(self) -> None:
        """Wait for every dispatch issued so far to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _spawn_dispatch(self, location: Location, message: str) -> None:
        task = asyncio.create_task(
            dispatch(self.publish_to, message, self.publishers),
            name=f"dispatch-{location.id}",
        )
        self._pending.add(task)
        task.add_done_callback(self._dispatch_done)

    def _dispatch_done(self, task: asyncio.Task[int]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        if task.exception() is not None:
            _LOGGER.warning("Dispatch task %s failed: %r", task.get_name(), task.exception())
            return
        self.published += task.result()

    async def _sleep(self, delay: float, stop: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop.wait(), timeout=delay)
        except TimeoutError:
            pass
