from datetime import datetime

import pytest

from pyappointmentmonitor.exceptions import ValidationError
from pyappointmentmonitor.util import (
    format_local_timestamp,
    parse_local_timestamp,
    parse_params,
    split_payload,
    split_request,
)


def test_parse_local_timestamp() -> None:
    assert parse_local_timestamp("2024-05-01T08:25:30") == datetime(2024, 5, 1, 8, 25, 30)


def test_parse_local_timestamp_drops_offset() -> None:
    assert parse_local_timestamp("2024-05-01T08:25+02:00") == datetime(2024, 5, 1, 8, 25)
    assert parse_local_timestamp("2024-05-01T08:25Z") == datetime(2024, 5, 1, 8, 25)


@pytest.mark.parametrize("value", ["", "   ", "yesterday", None])
def test_parse_local_timestamp_invalid(value) -> None:
    with pytest.raises(ValidationError):
        parse_local_timestamp(value)


def test_format_local_timestamp() -> None:
    assert format_local_timestamp(datetime(2024, 5, 1, 8, 0)) == "2024-05-01T08:00"
    assert format_local_timestamp(datetime(2024, 5, 1, 8, 0, 15)) == "2024-05-01T08:00:15"


def test_split_request() -> None:
    assert split_request("Log") == ("Log", "")
    assert split_request("Webhook=https://x/y|msg") == ("Webhook", "https://x/y|msg")
    # Only the first "=" separates the name.
    assert split_request("Pushover=user|title=Hi") == ("Pushover", "user|title=Hi")


def test_split_payload() -> None:
    assert split_payload("https://x/y") == ("https://x/y", None)
    assert split_payload("https://x/y|msg") == ("https://x/y", "msg")
    assert split_payload("") == ("", None)


def test_parse_params() -> None:
    assert parse_params(None) == {}
    assert parse_params("") == {}
    assert parse_params("device=phone&title=Slots") == {"device": "phone", "title": "Slots"}
    assert parse_params("a=1&a=2") == {"a": "2"}


def test_parse_params_invalid() -> None:
    with pytest.raises(ValidationError):
        parse_params("device")
