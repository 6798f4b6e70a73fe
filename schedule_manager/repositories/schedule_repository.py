# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Schedule data access.
Encapsulates all read/write operations on the in-memory schedule list and
its backing JSON file.
NO business rules here. Pure CRUD.
"""

import threading
from typing import Any, Optional

from schedule_manager.repositories.json_store import JsonFileStore


class ScheduleRepository:
    """In-memory schedule storage, written through to a JsonFileStore."""

    def __init__(self, store: JsonFileStore) -> None:
        self._store = store
        self._schedules: list[dict[str, Any]] = store.load()
        # Held by services around each mutation and its write.
        self.lock = threading.RLock()

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return list(self._schedules)

    def get_by_id(self, schedule_id: str) -> Optional[dict[str, Any]]:
        for schedule in self._schedules:
            if schedule["id"] == schedule_id:
                return schedule
        return None

    def count(self) -> int:
        return len(self._schedules)

    def file_stats(self) -> dict[str, Any]:
        return self._store.stats()

    # ── Write ──

    def add(self, schedule: dict[str, Any]) -> None:
        self._schedules.append(schedule)

    def replace(self, schedule: dict[str, Any]) -> None:
        for index, existing in enumerate(self._schedules):
            if existing["id"] == schedule["id"]:
                self._schedules[index] = schedule
                return
        raise KeyError(schedule["id"])

    def delete(self, schedule_id: str) -> Optional[dict[str, Any]]:
        for index, schedule in enumerate(self._schedules):
            if schedule["id"] == schedule_id:
                return self._schedules.pop(index)
        return None

    def clear(self) -> int:
        removed = len(self._schedules)
        self._schedules.clear()
        return removed

    # ── Persistence ──

    def persist(self) -> bool:
        return self._store.save(self._schedules)

    def backup(self) -> bool:
        return self._store.backup()
