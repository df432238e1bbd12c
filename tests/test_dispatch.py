from __future__ import annotations

import logging

import pytest

from pyappointmentmonitor.exceptions import PublishError
from pyappointmentmonitor.publisher.base import BasePublisher
from pyappointmentmonitor.publisher.registry import dispatch, validate_selections


class _RecordingPublisher(BasePublisher):
    def __init__(self, publisher_id: str, error: Exception | None = None) -> None:
        self.publisher_id = publisher_id
        self._error = error
        self.calls: list[tuple[str, str]] = []

    async def publish(self, request: str, message: str) -> None:
        self.calls.append((request, message))
        if self._error is not None:
            raise self._error


def _publishers(**overrides: BasePublisher) -> dict[str, BasePublisher]:
    publishers: dict[str, BasePublisher] = {
        "log": _RecordingPublisher("Log"),
        "webhook": _RecordingPublisher("Webhook"),
    }
    publishers.update(overrides)
    return publishers


@pytest.mark.asyncio
async def test_dispatch_routes_payloads() -> None:
    publishers = _publishers()
    delivered = await dispatch(["Webhook=https://x/y|msg", "Log"], "hello", publishers)
    assert delivered == 2
    assert publishers["webhook"].calls == [("https://x/y|msg", "hello")]  # type: ignore[attr-defined]
    assert publishers["log"].calls == [("", "hello")]  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_dispatch_failure_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    failing = _RecordingPublisher("Webhook", PublishError("status 500", status=500))
    publishers = _publishers(webhook=failing)
    with caplog.at_level(logging.WARNING):
        delivered = await dispatch(["Webhook=https://x/y|msg", "Log"], "hello", publishers)
    assert delivered == 1
    assert failing.calls == [("https://x/y|msg", "hello")]
    assert publishers["log"].calls == [("", "hello")]  # type: ignore[attr-defined]
    assert any("Webhook" in message for message in caplog.messages)


@pytest.mark.asyncio
async def test_dispatch_unexpected_error_is_logged() -> None:
    publishers = _publishers(webhook=_RecordingPublisher("Webhook", RuntimeError("bug")))
    assert await dispatch(["webhook=https://x", "log"], "hello", publishers) == 1


@pytest.mark.asyncio
async def test_dispatch_name_is_case_insensitive() -> None:
    publishers = _publishers()
    await dispatch(["LOG", "wEbHoOk=https://x"], "hello", publishers)
    assert len(publishers["log"].calls) == 1  # type: ignore[attr-defined]
    assert publishers["webhook"].calls == [("https://x", "hello")]  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_dispatch_skips_unknown_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    publishers = _publishers()
    with caplog.at_level(logging.WARNING):
        delivered = await dispatch(["Slack=abc", "Log"], "hello", publishers)
    assert delivered == 1
    assert any("Slack" in message for message in caplog.messages)


@pytest.mark.asyncio
async def test_dispatch_nothing_selected() -> None:
    assert await dispatch([], "hello", _publishers()) == 0


def test_validate_selections_returns_unknown() -> None:
    assert validate_selections(["Log", "Slack=x", "webhook=y"], _publishers()) == ["Slack=x"]
