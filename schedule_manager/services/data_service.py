# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Data transfer — JSON/CSV export, best-effort import and data-file
statistics.
"""

import csv
import io
import uuid
from datetime import datetime
from typing import Any, Callable

from pydantic import ValidationError

from schedule_manager.core.errors import PersistenceError
from schedule_manager.core.logging import get_logger
from schedule_manager.metrics.prometheus import (
    ACTIVE_SCHEDULES,
    PERSISTENCE_FAILURES,
    SCHEDULES_IMPORTED,
)
from schedule_manager.models.domain import to_iso, utcnow
from schedule_manager.repositories.schedule_repository import ScheduleRepository
from schedule_manager.schemas.schedule import ScheduleImportRecord

logger = get_logger(__name__)

CSV_FIELDS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "startDate",
    "endDate",
    "category",
    "priority",
    "isCompleted",
    "tags",
    "repeatType",
    "parentId",
    "createdAt",
    "updatedAt",
)
TAG_SEPARATOR = ";"


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


class DataService:
    """Bulk export/import over the schedule repository."""

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._schedules = schedule_repo
        self._clock = clock

    # ── Export ──

    def data_stats(self) -> dict[str, Any]:
        schedules = self._schedules.get_all()
        return {
            **self._schedules.file_stats(),
            "scheduleCount": len(schedules),
            "completedCount": sum(1 for s in schedules if s.get("isCompleted")),
        }

    def export_json(self) -> dict[str, Any]:
        schedules = self._schedules.get_all()
        logger.info("Exported %d schedules as JSON", len(schedules))
        return {
            "data": schedules,
            "total": len(schedules),
            "exportedAt": to_iso(self._clock()),
            "stats": self.data_stats(),
        }

    def export_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        schedules = self._schedules.get_all()
        for schedule in schedules:
            row = {name: schedule.get(name, "") for name in CSV_FIELDS}
            row["tags"] = TAG_SEPARATOR.join(schedule.get("tags") or [])
            row["isCompleted"] = "true" if schedule.get("isCompleted") else "false"
            row["repeatType"] = schedule.get("repeatType") or "none"
            row["description"] = schedule.get("description") or ""
            row["parentId"] = schedule.get("parentId") or ""
            writer.writerow(row)
        logger.info("Exported %d schedules as CSV", len(schedules))
        return buffer.getvalue()

    # ── Import ──

    def import_schedules(self, records: list[Any]) -> dict[str, Any]:
        """
        Re-create each record with a fresh id. Invalid records are skipped
        and reported; the rest are imported. Occurrences are not re-expanded.
        """
        now = to_iso(self._clock())
        id_map: dict[str, str] = {}
        pending: list[dict[str, Any]] = []
        errors: list[str] = []

        for index, raw in enumerate(records):
            try:
                record = ScheduleImportRecord.model_validate(raw)
            except ValidationError as exc:
                errors.append(f"Record {index}: {_format_validation_error(exc)}")
                continue

            schedule = record.to_schedule()
            new_id = str(uuid.uuid4())
            if record.id:
                id_map[record.id] = new_id
            schedule.update({"id": new_id, "createdAt": now, "updatedAt": now})
            pending.append(schedule)

        for schedule in pending:
            old_parent = schedule.pop("parentId", None)
            if old_parent and old_parent in id_map:
                schedule["parentId"] = id_map[old_parent]
            else:
                # An occurrence without its parent becomes a standalone schedule.
                schedule.pop("isRecurring", None)

        with self._schedules.lock:
            if not self._schedules.backup():
                logger.warning("Backup before import failed; continuing")
            for schedule in pending:
                self._schedules.add(schedule)

            SCHEDULES_IMPORTED.labels(status="imported").inc(len(pending))
            SCHEDULES_IMPORTED.labels(status="rejected").inc(len(errors))
            logger.info("Import finished: imported=%d, errors=%d", len(pending), len(errors))

            if pending:
                ACTIVE_SCHEDULES.set(self._schedules.count())
                if not self._schedules.persist():
                    PERSISTENCE_FAILURES.labels(collection="schedules").inc()
                    raise PersistenceError("schedules", "import")

        return {
            "importedCount": len(pending),
            "errorCount": len(errors),
            "errors": errors,
            "importedAt": now,
        }
