# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Template data access. Pure CRUD over the template list.
"""

import threading
from typing import Any, Optional

from schedule_manager.repositories.json_store import JsonFileStore


class TemplateRepository:
    """In-memory template storage, written through to a JsonFileStore."""

    def __init__(self, store: JsonFileStore) -> None:
        self._store = store
        self._templates: list[dict[str, Any]] = store.load()
        self.lock = threading.RLock()

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return list(self._templates)

    def get_by_id(self, template_id: str) -> Optional[dict[str, Any]]:
        for template in self._templates:
            if template["id"] == template_id:
                return template
        return None

    def count(self) -> int:
        return len(self._templates)

    # ── Write ──

    def add(self, template: dict[str, Any]) -> None:
        self._templates.append(template)

    def replace(self, template: dict[str, Any]) -> None:
        for index, existing in enumerate(self._templates):
            if existing["id"] == template["id"]:
                self._templates[index] = template
                return
        raise KeyError(template["id"])

    def delete(self, template_id: str) -> Optional[dict[str, Any]]:
        for index, template in enumerate(self._templates):
            if template["id"] == template_id:
                return self._templates.pop(index)
        return None

    # ── Persistence ──

    def persist(self) -> bool:
        return self._store.save(self._templates)
