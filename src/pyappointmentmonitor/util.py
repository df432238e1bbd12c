"""Shared utilities for parsing and normalization."""

from __future__ import annotations

from datetime import datetime

from .exceptions import ValidationError

REQUEST_SEPARATOR = "="
PAYLOAD_SEPARATOR = "|"
PARAM_SEPARATOR = "&"


def parse_local_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 local date-time into a naive datetime.

    An offset or trailing ``Z`` is tolerated and dropped; the wall time is kept.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Timestamp must be a non-empty string.")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1]
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"Timestamp {value!r} is not a valid ISO 8601 value.") from exc
    return parsed.replace(tzinfo=None)


def format_local_timestamp(value: datetime) -> str:
    if value.second or value.microsecond:
        return value.isoformat(timespec="seconds")
    return value.isoformat(timespec="minutes")


def split_request(selection: str) -> tuple[str, str]:
    """Split a ``Name[=payload]`` selection once into name and payload."""
    if not isinstance(selection, str):
        raise ValidationError("Publisher selection must be a string.")
    name, _, payload = selection.strip().partition(REQUEST_SEPARATOR)
    return name.strip(), payload


def split_payload(payload: str) -> tuple[str, str | None]:
    """Split a ``value[|extra]`` payload once; extra is None when absent."""
    head, separator, tail = payload.partition(PAYLOAD_SEPARATOR)
    return head.strip(), tail if separator else None


def parse_params(raw: str | None) -> dict[str, str]:
    """Parse ``key1=val1&key2=val2`` into a dict; later keys win."""
    if not raw:
        return {}
    params: dict[str, str] = {}
    for entry in raw.split(PARAM_SEPARATOR):
        if not entry:
            continue
        key, separator, value = entry.partition("=")
        if not separator or not key.strip():
            raise ValidationError(f"Parameter {entry!r} must look like key=value.")
        params[key.strip()] = value
    return params
