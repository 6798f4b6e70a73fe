# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Template management — CRUD, duplication and default seeding.
Unknown ids are reported with ``None``, never with exceptions.
"""

import copy
import uuid
from datetime import datetime
from typing import Any, Callable, Optional

from schedule_manager.core.errors import PersistenceError
from schedule_manager.core.logging import get_logger
from schedule_manager.metrics.prometheus import ACTIVE_TEMPLATES, PERSISTENCE_FAILURES
from schedule_manager.models.domain import to_iso, utcnow
from schedule_manager.repositories.template_repository import TemplateRepository

logger = get_logger(__name__)

COPY_SUFFIX = " (copy)"

DEFAULT_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Weekly Team Meeting",
        "description": "Recurring team sync",
        "category": "meeting",
        "priority": "medium",
        "duration": 60,
        "tags": ["meeting", "team"],
        "repeatType": "weekly",
        "repeatInterval": 1,
        "repeatDays": [1],
    },
    {
        "name": "1on1",
        "description": "One-to-one conversation",
        "category": "meeting",
        "priority": "high",
        "duration": 30,
        "tags": ["1on1"],
        "repeatType": "weekly",
        "repeatInterval": 2,
    },
    {
        "name": "Exercise",
        "description": "Regular workout",
        "category": "personal",
        "priority": "medium",
        "duration": 45,
        "tags": ["health", "exercise"],
        "repeatType": "daily",
        "repeatInterval": 1,
    },
    {
        "name": "Monthly Report",
        "description": "Prepare the monthly report",
        "category": "work",
        "priority": "high",
        "duration": 120,
        "tags": ["report", "monthly"],
        "repeatType": "monthly",
        "repeatInterval": 1,
    },
    {
        "name": "Dental Check-up",
        "description": "Routine dental appointment",
        "category": "personal",
        "priority": "medium",
        "duration": 30,
        "tags": ["health"],
        "repeatType": "none",
    },
]


class TemplateService:
    """Business logic for reusable schedule templates."""

    def __init__(
        self,
        template_repo: TemplateRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._templates = template_repo
        self._clock = clock

    def _persist(self, operation: str) -> None:
        ACTIVE_TEMPLATES.set(self._templates.count())
        if not self._templates.persist():
            PERSISTENCE_FAILURES.labels(collection="templates").inc()
            raise PersistenceError("templates", operation)

    # ── Queries ──

    def list_templates(self) -> list[dict[str, Any]]:
        return sorted(self._templates.get_all(), key=lambda t: t["name"].casefold())

    def get_template(self, template_id: str) -> Optional[dict[str, Any]]:
        return self._templates.get_by_id(template_id)

    def list_by_category(self, category: str) -> list[dict[str, Any]]:
        return [t for t in self._templates.get_all() if t["category"] == category]

    # ── Commands ──

    def create_template(self, data: dict[str, Any]) -> dict[str, Any]:
        now = to_iso(self._clock())
        template: dict[str, Any] = {
            **{k: v for k, v in data.items() if v is not None},
            "id": str(uuid.uuid4()),
            "createdAt": now,
            "updatedAt": now,
        }
        with self._templates.lock:
            self._templates.add(template)
            logger.info("Template created: id=%s, name=%s", template["id"], template["name"])
            self._persist("create")
        return template

    def update_template(
        self, template_id: str, changes: dict[str, Any]
    ) -> Optional[dict[str, Any]]:
        with self._templates.lock:
            existing = self._templates.get_by_id(template_id)
            if existing is None:
                return None

            updated = {**existing, **changes}
            updated["id"] = existing["id"]
            updated["createdAt"] = existing["createdAt"]
            updated["updatedAt"] = to_iso(self._clock())
            self._templates.replace(updated)
            logger.info("Template updated: id=%s, fields=%s", template_id, sorted(changes))
            self._persist("update")
            return updated

    def delete_template(self, template_id: str) -> bool:
        with self._templates.lock:
            if self._templates.delete(template_id) is None:
                return False
            logger.info("Template deleted: id=%s", template_id)
            self._persist("delete")
            return True

    def duplicate_template(
        self, template_id: str, new_name: Optional[str] = None
    ) -> Optional[dict[str, Any]]:
        with self._templates.lock:
            original = self._templates.get_by_id(template_id)
            if original is None:
                return None

            now = to_iso(self._clock())
            duplicate = copy.deepcopy(original)
            duplicate.update(
                {
                    "id": str(uuid.uuid4()),
                    "name": new_name or f"{original['name']}{COPY_SUFFIX}",
                    "createdAt": now,
                    "updatedAt": now,
                }
            )
            self._templates.add(duplicate)
            logger.info("Template duplicated: source=%s, id=%s", template_id, duplicate["id"])
            self._persist("duplicate")
            return duplicate

    # ── Seed ──

    def seed_defaults(self) -> int:
        """Create the default templates when the store is empty. Returns how many were added."""
        with self._templates.lock:
            if self._templates.count() > 0:
                return 0
            now = to_iso(self._clock())
            for data in DEFAULT_TEMPLATES:
                self._templates.add(
                    {
                        **copy.deepcopy(data),
                        "id": str(uuid.uuid4()),
                        "createdAt": now,
                        "updatedAt": now,
                    }
                )
            logger.info("Seeded %d default templates", len(DEFAULT_TEMPLATES))
            self._persist("seed")
        return len(DEFAULT_TEMPLATES)
