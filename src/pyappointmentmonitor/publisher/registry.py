"""Publisher lookup table and multi-sink dispatch."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Mapping

from ..exceptions import PyAppointmentMonitorError
from ..http import HttpClient
from ..models import PublisherInfo
from ..util import split_request
from .base import BasePublisher
from .log import LogPublisher
from .pushover import PushoverPublisher
from .webhook import WebhookPublisher

_LOGGER = logging.getLogger(__name__)

PublisherMap = Mapping[str, BasePublisher]


def build_publishers(
    http: HttpClient,
    *,
    pushover_token: str | None = None,
) -> dict[str, BasePublisher]:
    """Return the publisher table keyed by lower-cased publisher name."""
    publishers: tuple[BasePublisher, ...] = (
        LogPublisher(),
        WebhookPublisher(http),
        PushoverPublisher(http, pushover_token),
    )
    return {publisher.name.lower(): publisher for publisher in publishers}


def list_publishers(publishers: PublisherMap) -> list[PublisherInfo]:
    return [publisher.info for publisher in publishers.values()]


def get_publisher(publishers: PublisherMap, name: str) -> BasePublisher | None:
    return publishers.get(name.strip().lower())


def validate_selections(selections: Iterable[str], publishers: PublisherMap) -> list[str]:
    """Return the selections whose publisher name is unknown."""
    unknown: list[str] = []
    for selection in selections:
        name, _ = split_request(selection)
        if get_publisher(publishers, name) is None:
            unknown.append(selection)
    return unknown


async def dispatch(
    selections: Iterable[str],
    message: str,
    publishers: PublisherMap,
) -> int:
    """Publish ``message`` to every selected sink concurrently.

    Failures are logged per sink and never raised. Returns the number of
    sinks that accepted the message.
    """
    jobs: list[tuple[str, Awaitable[None]]] = []
    for selection in selections:
        name, payload = split_request(selection)
        publisher = get_publisher(publishers, name)
        if publisher is None:
            _LOGGER.warning("Skipping unknown publisher %r in selection %r", name, selection)
            continue
        jobs.append((publisher.name, publisher.publish(payload, message)))
    if not jobs:
        return 0
    results = await asyncio.gather(*(job for _, job in jobs), return_exceptions=True)
    delivered = 0
    for (name, _), result in zip(jobs, results):
        if isinstance(result, PyAppointmentMonitorError):
            _LOGGER.warning("Publisher %s failed: %s", name, result)
        elif isinstance(result, Exception):
            _LOGGER.warning("Publisher %s failed unexpectedly: %r", name, result)
        elif isinstance(result, BaseException):
            raise result
        else:
            delivered += 1
    return delivered
