# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire stores, repositories and services.

The container is built once per application by ``create_app`` and kept on
``app.state``; dependency functions look it up from the request, so no
module-level singletons exist.
"""

from datetime import datetime
from typing import Callable

from fastapi import Request

from schedule_manager.core.config import Settings
from schedule_manager.core.errors import PersistenceError
from schedule_manager.core.logging import get_logger
from schedule_manager.metrics.prometheus import ACTIVE_SCHEDULES, ACTIVE_TEMPLATES
from schedule_manager.models.domain import utcnow
from schedule_manager.repositories.json_store import JsonFileStore
from schedule_manager.repositories.schedule_repository import ScheduleRepository
from schedule_manager.repositories.template_repository import TemplateRepository
from schedule_manager.services.data_service import DataService
from schedule_manager.services.schedule_service import ScheduleService
from schedule_manager.services.template_service import TemplateService

logger = get_logger(__name__)


class Container:
    """Process-wide object graph, built once at startup."""

    def __init__(self, settings: Settings, clock: Callable[[], datetime] = utcnow) -> None:
        self.settings = settings
        self.clock = clock

        self.schedule_repo = ScheduleRepository(JsonFileStore(settings.schedules_path))
        self.template_repo = TemplateRepository(JsonFileStore(settings.templates_path))

        self.template_service = TemplateService(self.template_repo, clock=clock)
        self.schedule_service = ScheduleService(
            schedule_repo=self.schedule_repo,
            template_service=self.template_service,
            max_occurrences=settings.MAX_OCCURRENCES,
            clock=clock,
        )
        self.data_service = DataService(self.schedule_repo, clock=clock)

        if settings.SEED_DEFAULT_TEMPLATES:
            try:
                self.template_service.seed_defaults()
            except PersistenceError as exc:
                logger.error("Default templates seeded in memory only: %s", exc)

        ACTIVE_SCHEDULES.set(self.schedule_repo.count())
        ACTIVE_TEMPLATES.set(self.template_repo.count())


# ── FastAPI dependency functions ──
def get_container(request: Request) -> Container:
    return request.app.state.container


def get_schedule_service(request: Request) -> ScheduleService:
    return get_container(request).schedule_service


def get_template_service(request: Request) -> TemplateService:
    return get_container(request).template_service


def get_data_service(request: Request) -> DataService:
    return get_container(request).data_service
