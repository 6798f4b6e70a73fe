# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Schedule Service
================
REST API for personal schedules and reusable schedule templates.
State is held in memory and written through to flat JSON files after every
mutation. Repeating schedules are expanded into concrete occurrences at
creation time (at most MAX_OCCURRENCES per schedule).

Port: 3001 (run with `uvicorn main:create_app --factory` or `python main.py`)
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schedule_manager.controllers import schedule_controller, system_controller, template_controller
from schedule_manager.core.config import Settings, settings as default_settings
from schedule_manager.core.dependencies import Container
from schedule_manager.core.errors import PersistenceError
from schedule_manager.core.logging import configure_logging, get_logger
from schedule_manager.middleware import MetricsMiddleware, RequestIDMiddleware
from schedule_manager.models.domain import utcnow
from schedule_manager.schemas.common import ErrorResponse

logger = get_logger("schedule-service")


def _validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    details = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ())]
        field = ".".join(loc[1:]) if len(loc) > 1 else (loc[0] if loc else "body")
        details.append({"field": field, "message": err.get("msg", "Invalid value")})
    return details


def create_app(
    app_settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """Build the application and its object graph."""
    app_settings = app_settings or default_settings
    configure_logging(app_settings)

    @asynccontextmanager
    async def lifespan(application: FastAPI):
        container = application.state.container
        logger.info(
            "Schedule service starting: %d schedules, %d templates, data_dir=%s",
            container.schedule_repo.count(),
            container.template_repo.count(),
            app_settings.DATA_DIR,
        )
        yield
        logger.info("Schedule service shutting down")

    app = FastAPI(
        title="Schedule Service",
        description="Personal schedules, recurring occurrences, templates and analytics.",
        version=app_settings.SERVICE_VERSION,
        lifespan=lifespan,
        responses={
            400: {"model": ErrorResponse, "description": "Validation error"},
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )
    app.state.container = Container(app_settings, clock=clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "details": _validation_details(exc)},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_exception_handler(request: Request, exc: PersistenceError):
        req_id = getattr(request.state, "request_id", None)
        logger.error("Persistence failure: %s", exc, extra={"request_id": req_id})
        return JSONResponse(
            status_code=500,
            content={"error": "persistence_failure", "detail": str(exc), "request_id": req_id},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled exception", extra={"request_id": req_id})
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
        )

    app.include_router(system_controller.router)
    app.include_router(schedule_controller.router)
    app.include_router(template_controller.router)
    return app


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=default_settings.SERVICE_PORT, log_level="info")
