# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain vocabulary — enum values, field limits and timestamp helpers.
Pure data, NO FastAPI dependency.
"""

from datetime import datetime, timezone
from typing import Any, Optional

CATEGORIES: tuple[str, ...] = ("work", "personal", "meeting", "reminder", "other")
PRIORITIES: tuple[str, ...] = ("high", "medium", "low")
REPEAT_TYPES: tuple[str, ...] = ("none", "daily", "weekly", "monthly", "yearly")

CATEGORY_PATTERN = f"^({'|'.join(CATEGORIES)})$"
PRIORITY_PATTERN = f"^({'|'.join(PRIORITIES)})$"
REPEAT_TYPE_PATTERN = f"^({'|'.join(REPEAT_TYPES)})$"

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 1440
MAX_REPEAT_INTERVAL = 365

# Fields a plain schedule update may touch; repeat metadata is never merged.
UPDATABLE_SCHEDULE_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "startDate",
    "endDate",
    "category",
    "priority",
    "isCompleted",
    "tags",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored ISO-8601 timestamp into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    return ensure_aware(datetime.fromisoformat(str(value)))


def to_iso(value: datetime) -> str:
    return ensure_aware(value).astimezone(timezone.utc).isoformat()


def js_weekday(value: datetime) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7
