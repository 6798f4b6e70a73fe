# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Recurrence expansion — pure computation, no side effects.

Turns a parent schedule with a repeat rule into a bounded list of sibling
occurrences. Weekdays use 0=Sunday .. 6=Saturday and all calendar
arithmetic is done in UTC.
"""

import copy
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from schedule_manager.models.domain import js_weekday, parse_timestamp, to_iso, utcnow

DEFAULT_MAX_OCCURRENCES = 100


def add_months(value: datetime, months: int) -> datetime:
    """Shift by whole months keeping the day-of-month.

    Days past the end of the target month spill into the next one
    (Jan 31 + 1 month -> Mar 3, or Mar 2 in a leap year).
    """
    total = value.month - 1 + months
    year = value.year + total // 12
    month = total % 12 + 1
    return value.replace(year=year, month=month, day=1) + timedelta(days=value.day - 1)


def next_occurrence(
    current: datetime,
    repeat_type: str,
    interval: int = 1,
    repeat_days: Optional[Sequence[int]] = None,
) -> datetime:
    """Return the occurrence following ``current`` for the given rule."""
    interval = interval or 1

    if repeat_type == "daily":
        return current + timedelta(days=interval)

    if repeat_type == "weekly":
        if repeat_days:
            days = sorted(set(repeat_days))
            today = js_weekday(current)
            later_this_week = [d for d in days if d > today]
            if later_this_week:
                # Same-week advance ignores the interval.
                return current + timedelta(days=later_this_week[0] - today)
            days_until = 7 - today + days[0] + 7 * (interval - 1)
            return current + timedelta(days=days_until)
        return current + timedelta(days=7 * interval)

    if repeat_type == "monthly":
        return add_months(current, interval)

    if repeat_type == "yearly":
        return add_months(current, 12 * interval)

    raise ValueError(f"Unsupported repeat type: {repeat_type!r}")


def generate_occurrences(
    parent: dict[str, Any],
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
    clock: Callable[[], datetime] = utcnow,
) -> list[dict[str, Any]]:
    """
    Expand ``parent`` into at most ``max_occurrences`` derived schedules.
    The parent is neither mutated nor included in the result.
    """
    repeat_type = parent.get("repeatType") or "none"
    if repeat_type == "none":
        return []

    start = parse_timestamp(parent["startDate"])
    duration = parse_timestamp(parent["endDate"]) - start
    interval = parent.get("repeatInterval") or 1
    repeat_days = parent.get("repeatDays") or None
    repeat_end = parse_timestamp(parent.get("repeatEndDate"))

    occurrences: list[dict[str, Any]] = []
    current = start
    while len(occurrences) < max_occurrences:
        nxt = next_occurrence(current, repeat_type, interval, repeat_days)
        if repeat_end is not None and nxt > repeat_end:
            break

        stamp = to_iso(clock())
        occurrence = copy.deepcopy(parent)
        occurrence.update(
            {
                "id": str(uuid.uuid4()),
                "startDate": to_iso(nxt),
                "endDate": to_iso(nxt + duration),
                "parentId": parent["id"],
                "isRecurring": True,
                "createdAt": stamp,
                "updatedAt": stamp,
            }
        )
        occurrences.append(occurrence)
        current = nxt

    return occurrences
