from __future__ import annotations

from datetime import datetime

import pytest

from pyappointmentmonitor import cli
from pyappointmentmonitor.config import Settings
from pyappointmentmonitor.models import Location
from pyappointmentmonitor.publisher import LogPublisher


class _FakeService:
    def __init__(self, locations: list[Location]) -> None:
        self._locations = locations

    async def fetch_locations(self) -> list[Location]:
        return self._locations


class _FakeClient:
    def __init__(self, locations: list[Location]) -> None:
        self.service = _FakeService(locations)

    async def __aenter__(self) -> _FakeClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    def get_service(self) -> _FakeService:
        return self.service

    def get_publishers(self) -> dict[str, LogPublisher]:
        return {"log": LogPublisher()}


class _FakeMonitor:
    instances: list[_FakeMonitor] = []

    def __init__(self, **kwargs) -> None:
        self.kwargs = kwargs
        self.ran = False
        _FakeMonitor.instances.append(self)

    async def run(self, stop_event) -> None:
        self.ran = True


LOCATIONS = [
    Location(id=5140, name="JFK International", short_name="JFK", city="Jamaica", state="NY"),
    Location(id=5002, name="San Diego Otay Mesa", short_name="Otay", city="San Diego", state="CA"),
]


@pytest.fixture
def patched(monkeypatch: pytest.MonkeyPatch) -> None:
    _FakeMonitor.instances.clear()
    monkeypatch.setattr(cli, "get_settings", lambda: Settings())
    monkeypatch.setattr(cli, "setup_logging", lambda cfg: None)
    monkeypatch.setattr(cli, "_client", lambda settings, args: _FakeClient(LOCATIONS))
    monkeypatch.setattr(cli, "_install_signal_handlers", lambda stop: None)
    monkeypatch.setattr(cli, "Monitor", _FakeMonitor)


def test_parse_args_defaults() -> None:
    args = cli._parse_args(["ttp", "--location-ids", "5140, 5002"])
    assert args.location_ids == [5140, 5002]
    assert args.before == datetime.max
    assert args.publish_to == ["Log"]
    assert args.poll_period is None


def test_parse_args_values() -> None:
    args = cli._parse_args(
        [
            "ttp",
            "--location-ids",
            "5140",
            "--before",
            "2024-05-01T08:25:30",
            "--publish-to",
            "Log,Webhook=https://x/y|msg",
            "--poll-period",
            "60",
        ]
    )
    assert args.before == datetime(2024, 5, 1, 8, 25, 30)
    assert args.publish_to == ["Log", "Webhook=https://x/y|msg"]
    assert args.poll_period == 60


@pytest.mark.parametrize("ids", ["abc", ","])
def test_parse_args_rejects_bad_ids(ids: str) -> None:
    with pytest.raises(SystemExit):
        cli._parse_args(["ttp", "--location-ids", ids])


def test_main_runs_monitor(patched: None) -> None:
    assert cli.main(["ttp", "--location-ids", "5140", "--backoff-period", "120"]) == 0
    (monitor,) = _FakeMonitor.instances
    assert monitor.ran is True
    assert list(monitor.kwargs["locations"]) == [5140]
    assert monitor.kwargs["poll_period"] == 30.0
    assert monitor.kwargs["backoff_period"] == 120.0
    assert monitor.kwargs["publish_to"] == ("Log",)


def test_main_unknown_location_fails(patched: None, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["ttp", "--location-ids", "5140,1,2"]) == 1
    assert "[1, 2]" in capsys.readouterr().err
    assert _FakeMonitor.instances == []


def test_main_invalid_poll_period_fails(patched: None, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["ttp", "--location-ids", "5140", "--poll-period", "1"]) == 1
    assert "Invalid monitor options" in capsys.readouterr().err


def test_main_lists_locations(patched: None, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["locations", "--search", "otay"]) == 0
    out = capsys.readouterr().out
    assert "5002\tOtay (5002)\tSan Diego, CA" in out
    assert "5140" not in out
