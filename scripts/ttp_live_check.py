"""Manual live check against the scheduler API.

Run from the repository root with:
  PYTHONPATH=src TTP_LOCATION_ID=5140 python scripts/ttp_live_check.py

Optional environment variables:
  AM_ENDPOINT
  TTP_BEFORE (ISO local date-time cutoff)

The script only reads from the API and never publishes anything.
"""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import datetime

from pyappointmentmonitor import Client, classify_slots, format_notification, resolve_locations
from pyappointmentmonitor.util import parse_local_timestamp


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        print(f"Missing required environment variable: {name}", file=sys.stderr)
        raise SystemExit(2)
    return value


async def main() -> int:
    location_id = int(_require_env("TTP_LOCATION_ID"))
    before_raw = os.getenv("TTP_BEFORE")
    before = parse_local_timestamp(before_raw) if before_raw else datetime.max

    try:
        async with Client(endpoint=os.getenv("AM_ENDPOINT")) as client:
            service = client.get_service()
            known = await service.fetch_locations()
            location = resolve_locations([location_id], known)[location_id]
            availability = await service.fetch_slot_availability(location_id)
    except Exception as exc:
        print(f"Error: {exc.__class__.__name__}: {exc}", file=sys.stderr)
        return 1

    classified = classify_slots(availability.available_slots, before)
    print(f"Locations known: {len(known)}")
    print(f"Location: {location.simple_name} ({location.city}, {location.state})")
    print(f"Last published: {availability.last_published_date}")
    print(
        f"Slots: {len(classified.eligible)} eligible, "
        f"{len(classified.ineligible)} after cutoff, {len(classified.inactive)} inactive"
    )
    if classified.eligible:
        print(
            format_notification(
                [slot.start_timestamp for slot in classified.eligible],
                location.simple_name,
            )
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
