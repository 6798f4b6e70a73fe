# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Schedule management — business logic for queries and mutations.
Coordinates repository writes with recurrence expansion, persistence,
metrics and logging.

Unknown ids come back as ``None`` (or as entries in an ``errors`` list for
bulk calls); bad input raises ValueError; a failed disk write raises
PersistenceError after the in-memory change has been applied.
"""

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from schedule_manager.core.errors import PersistenceError
from schedule_manager.core.logging import get_logger
from schedule_manager.metrics.prometheus import (
    ACTIVE_SCHEDULES,
    OCCURRENCES_GENERATED,
    PERSISTENCE_FAILURES,
    SCHEDULES_CREATED,
    SCHEDULES_DELETED,
    TEMPLATES_USED,
)
from schedule_manager.models.domain import (
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    UPDATABLE_SCHEDULE_FIELDS,
    parse_timestamp,
    to_iso,
    utcnow,
)
from schedule_manager.repositories.schedule_repository import ScheduleRepository
from schedule_manager.services.analytics import compute_statistics
from schedule_manager.services.recurrence import DEFAULT_MAX_OCCURRENCES, generate_occurrences
from schedule_manager.services.template_service import TemplateService

logger = get_logger(__name__)


@dataclass
class ScheduleQuery:
    """Filters for list_schedules. Unset fields do not filter."""

    category: Optional[str] = None
    priority: Optional[str] = None
    is_completed: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None
    tags: list[str] = field(default_factory=list)


def _check_date_order(start: Any, end: Any) -> None:
    if parse_timestamp(end) <= parse_timestamp(start):
        raise ValueError("endDate must be after startDate")


def _matches(schedule: dict[str, Any], query: ScheduleQuery) -> bool:
    if query.category and schedule.get("category") != query.category:
        return False
    if query.priority and schedule.get("priority") != query.priority:
        return False
    if query.is_completed is not None and bool(schedule.get("isCompleted")) != query.is_completed:
        return False
    if query.search:
        needle = query.search.lower()
        title = (schedule.get("title") or "").lower()
        description = (schedule.get("description") or "").lower()
        if needle not in title and needle not in description:
            return False
    if query.tags:
        if not set(query.tags) & set(schedule.get("tags") or []):
            return False
    if query.start_date is not None and query.end_date is not None:
        start = parse_timestamp(schedule["startDate"])
        if not (parse_timestamp(query.start_date) <= start <= parse_timestamp(query.end_date)):
            return False
    return True


class ScheduleService:
    """Business logic for schedules and their recurring occurrences."""

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        template_service: TemplateService,
        max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._schedules = schedule_repo
        self._templates = template_service
        self._max_occurrences = max_occurrences
        self._clock = clock

    def _persist(self, operation: str) -> None:
        ACTIVE_SCHEDULES.set(self._schedules.count())
        if not self._schedules.persist():
            PERSISTENCE_FAILURES.labels(collection="schedules").inc()
            raise PersistenceError("schedules", operation)

    # ── Queries ──

    def list_schedules(self, query: Optional[ScheduleQuery] = None) -> list[dict[str, Any]]:
        schedules = self._schedules.get_all()
        if query is not None:
            schedules = [s for s in schedules if _matches(s, query)]
        return sorted(schedules, key=lambda s: parse_timestamp(s["startDate"]))

    def get_schedule(self, schedule_id: str) -> Optional[dict[str, Any]]:
        return self._schedules.get_by_id(schedule_id)

    def get_statistics(self) -> dict[str, Any]:
        return compute_statistics(self._schedules.get_all(), self._clock())

    # ── Commands ──

    def create_schedule(self, data: dict[str, Any]) -> dict[str, Any]:
        """Create a schedule plus its recurring occurrences. Raises ValueError on bad input."""
        _check_date_order(data["startDate"], data["endDate"])

        now = to_iso(self._clock())
        schedule: dict[str, Any] = {
            **{k: v for k, v in data.items() if v is not None},
            "id": str(uuid.uuid4()),
            "startDate": to_iso(parse_timestamp(data["startDate"])),
            "endDate": to_iso(parse_timestamp(data["endDate"])),
            "isCompleted": False,
            "createdAt": now,
            "updatedAt": now,
        }
        if schedule.get("repeatEndDate"):
            schedule["repeatEndDate"] = to_iso(parse_timestamp(schedule["repeatEndDate"]))

        repeat_type = schedule.get("repeatType") or "none"
        occurrences: list[dict[str, Any]] = []
        if repeat_type != "none":
            occurrences = generate_occurrences(schedule, self._max_occurrences, self._clock)

        with self._schedules.lock:
            self._schedules.add(schedule)
            for occurrence in occurrences:
                self._schedules.add(occurrence)
            SCHEDULES_CREATED.labels(category=schedule["category"]).inc()
            if occurrences:
                OCCURRENCES_GENERATED.labels(repeat_type=repeat_type).inc(len(occurrences))
            logger.info(
                "Schedule created: id=%s, repeat=%s, occurrences=%d",
                schedule["id"], repeat_type, len(occurrences),
            )
            self._persist("create")
        return schedule

    def update_schedule(
        self, schedule_id: str, changes: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        """Merge the provided fields into a schedule. Raises ValueError on bad input."""
        with self._schedules.lock:
            existing = self._schedules.get_by_id(schedule_id)
            if existing is None:
                return None

            updated = dict(existing)
            for key in UPDATABLE_SCHEDULE_FIELDS:
                if key in changes:
                    updated[key] = changes[key]
            for key in ("startDate", "endDate"):
                if key in changes:
                    updated[key] = to_iso(parse_timestamp(updated[key]))
            _check_date_order(updated["startDate"], updated["endDate"])

            updated["updatedAt"] = to_iso(self._clock())
            self._schedules.replace(updated)
            logger.info(
                "Schedule updated: id=%s, fields=%s",
                schedule_id, sorted(k for k in changes if k in UPDATABLE_SCHEDULE_FIELDS),
            )
            self._persist("update")
            return updated

    def delete_schedule(self, schedule_id: str) -> bool:
        with self._schedules.lock:
            if self._schedules.delete(schedule_id) is None:
                return False
            SCHEDULES_DELETED.inc()
            logger.info("Schedule deleted: id=%s", schedule_id)
            self._persist("delete")
            return True

    def delete_schedules(self, ids: list[str]) -> dict[str, Any]:
        """Delete each id independently; unknown ids are reported, not raised."""
        deleted = 0
        errors: list[str] = []
        with self._schedules.lock:
            for schedule_id in ids:
                if self._schedules.delete(schedule_id) is None:
                    errors.append(f"Schedule not found: {schedule_id}")
                else:
                    deleted += 1

            if deleted:
                SCHEDULES_DELETED.inc(deleted)
                logger.info("Bulk delete: deleted=%d, errors=%d", deleted, len(errors))
                self._persist("bulk delete")
        return {"deletedCount": deleted, "errors": errors}

    def delete_all(self) -> dict[str, int]:
        with self._schedules.lock:
            if not self._schedules.backup():
                logger.warning("Backup before delete-all failed; continuing")
            deleted = self._schedules.clear()
            SCHEDULES_DELETED.inc(deleted)
            logger.info("All schedules deleted: count=%d", deleted)
            self._persist("delete all")
        return {"deletedCount": deleted}

    # ── Templates ──

    def create_from_template(
        self,
        template_id: str,
        start_date: datetime,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Materialise one single (non-repeating) schedule from a template."""
        template = self._templates.get_template(template_id)
        if template is None:
            return None

        start = parse_timestamp(start_date)
        end = start + timedelta(minutes=template["duration"])
        merged_description = "\n".join(
            part for part in (template.get("description"), description) if part
        ).strip()

        data: dict[str, Any] = {
            "title": title or template["name"],
            "description": merged_description or None,
            "startDate": start,
            "endDate": end,
            "category": template["category"],
            "priority": template["priority"],
            "tags": list(template.get("tags") or []),
            "repeatType": "none",
        }
        schedule = self.create_schedule(data)
        TEMPLATES_USED.inc()
        logger.info("Schedule created from template: template=%s, id=%s", template_id, schedule["id"])
        return schedule

    def create_template_from_schedule(
        self, schedule_id: str, name: str
    ) -> Optional[dict[str, Any]]:
        schedule = self._schedules.get_by_id(schedule_id)
        if schedule is None:
            return None

        elapsed = parse_timestamp(schedule["endDate"]) - parse_timestamp(schedule["startDate"])
        duration = int(math.floor(elapsed.total_seconds() / 60 + 0.5))
        duration = max(MIN_DURATION_MINUTES, min(MAX_DURATION_MINUTES, duration))

        data: dict[str, Any] = {
            "name": name,
            "description": schedule.get("description"),
            "category": schedule["category"],
            "priority": schedule["priority"],
            "duration": duration,
            "tags": list(schedule.get("tags") or []),
            "repeatType": schedule.get("repeatType"),
            "repeatInterval": schedule.get("repeatInterval"),
            "repeatDays": schedule.get("repeatDays"),
        }
        return self._templates.create_template(data)
