"""Slot classification and notification formatting."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from .models import AvailableSlot, ClassifiedSlots
from .util import format_local_timestamp

DISPLAY_LIMIT = 3


def classify_slots(slots: Sequence[AvailableSlot], cutoff: datetime) -> ClassifiedSlots:
    """Partition slots into inactive, ineligible and eligible groups.

    A slot is eligible when it is active and starts strictly before ``cutoff``.
    Input order is preserved within each group.
    """
    classified = ClassifiedSlots()
    for slot in slots:
        if not slot.active:
            classified.inactive.append(slot)
        elif slot.start_timestamp < cutoff:
            classified.eligible.append(slot)
        else:
            classified.ineligible.append(slot)
    return classified


def format_notification(
    timestamps: Sequence[datetime],
    location_label: str,
    *,
    limit: int = DISPLAY_LIMIT,
) -> str:
    """Build the notification text for eligible slots at one location.

    Shows at most ``limit`` timestamps followed by the last one when there
    are more.
    """
    if not timestamps:
        raise ValueError("At least one timestamp is required.")
    count = len(timestamps)
    noun = "slot" if count == 1 else "slots"
    rendered = [format_local_timestamp(value) for value in timestamps]
    if count == 1:
        listing = rendered[0]
    elif count <= limit:
        listing = f"{', '.join(rendered[:-1])} and {rendered[-1]}"
    else:
        listing = f"{', '.join(rendered[:limit])} ... and {rendered[-1]}"
    return f"Found {count} {noun} at {location_label} starting at {listing}."
