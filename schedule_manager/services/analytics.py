# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Analytics aggregation — pure, read-only computation over a
schedule list. No I/O, no metrics, no logging.

Bucket membership for summary buckets and the daily trend uses
``startDate``; the monthly trend uses ``createdAt``. All windows are
half-open ``[start, end)`` in UTC, weeks start on Sunday.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from schedule_manager.models.domain import (
    CATEGORIES,
    PRIORITIES,
    ensure_aware,
    js_weekday,
    parse_timestamp,
    to_iso,
)
from schedule_manager.services.recurrence import add_months

TREND_DAYS = 7
TREND_MONTHS = 6


def completion_rate(completed: int, total: int) -> int:
    """Percentage rounded half-up; 0 for an empty set."""
    if total == 0:
        return 0
    return int(math.floor(completed / total * 100 + 0.5))


def _in_window(value: Optional[datetime], start: datetime, end: datetime) -> bool:
    return value is not None and start <= value < end


def _bucket(
    schedules: list[dict[str, Any]],
    field: str,
    start: datetime,
    end: datetime,
) -> list[dict[str, Any]]:
    return [s for s in schedules if _in_window(parse_timestamp(s.get(field)), start, end)]


def _bucket_stats(members: Iterable[dict[str, Any]]) -> dict[str, int]:
    members = list(members)
    completed = sum(1 for s in members if s.get("isCompleted"))
    return {"total": len(members), "completed": completed, "remaining": len(members) - completed}


def compute_statistics(schedules: list[dict[str, Any]], now: datetime) -> dict[str, Any]:
    now = ensure_aware(now).astimezone(timezone.utc)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    day_end = day_start + timedelta(days=1)
    week_start = day_start - timedelta(days=js_weekday(now))
    week_end = week_start + timedelta(days=7)
    month_start = day_start.replace(day=1)
    month_end = add_months(month_start, 1)

    total = len(schedules)
    completed = sum(1 for s in schedules if s.get("isCompleted"))
    overdue = sum(
        1
        for s in schedules
        if not s.get("isCompleted") and parse_timestamp(s["endDate"]) < now
    )

    category_distribution = {c: 0 for c in CATEGORIES}
    priority_distribution = {p: 0 for p in PRIORITIES}
    for s in schedules:
        if s.get("category") in category_distribution:
            category_distribution[s["category"]] += 1
        if s.get("priority") in priority_distribution:
            priority_distribution[s["priority"]] += 1

    completion_trend: list[dict[str, Any]] = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        start = day_start - timedelta(days=offset)
        stats = _bucket_stats(_bucket(schedules, "startDate", start, start + timedelta(days=1)))
        completion_trend.append(
            {
                "date": start.date().isoformat(),
                "total": stats["total"],
                "completed": stats["completed"],
                "completionRate": completion_rate(stats["completed"], stats["total"]),
            }
        )

    monthly_trend: list[dict[str, Any]] = []
    for offset in range(TREND_MONTHS - 1, -1, -1):
        start = add_months(month_start, -offset)
        stats = _bucket_stats(_bucket(schedules, "createdAt", start, add_months(start, 1)))
        monthly_trend.append(
            {
                "month": start.strftime("%Y-%m"),
                "count": stats["total"],
                "completed": stats["completed"],
            }
        )

    return {
        "summary": {
            "total": total,
            "completed": completed,
            "completionRate": completion_rate(completed, total),
            "overdue": overdue,
            "today": _bucket_stats(_bucket(schedules, "startDate", day_start, day_end)),
            "thisWeek": _bucket_stats(_bucket(schedules, "startDate", week_start, week_end)),
            "thisMonth": _bucket_stats(_bucket(schedules, "startDate", month_start, month_end)),
        },
        "categoryDistribution": category_distribution,
        "priorityDistribution": priority_distribution,
        "completionTrend": completion_trend,
        "monthlyTrend": monthly_trend,
        "generatedAt": to_iso(now),
    }
