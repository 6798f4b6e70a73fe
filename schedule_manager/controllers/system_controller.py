# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer, no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from schedule_manager.core.dependencies import Container, get_container

router = APIRouter(tags=["System"])


@router.get("/health")
@router.get("/api/health")
def health_check(container: Container = Depends(get_container)):
    """Liveness check for Docker and orchestration."""
    return {
        "status": "ok",
        "service": container.settings.SERVICE_NAME,
        "version": container.settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "schedules_count": container.schedule_repo.count(),
        "templates_count": container.template_repo.count(),
    }


@router.get("/health/ready")
def readiness_check(container: Container = Depends(get_container)):
    """Readiness check: data directory usable and templates loaded."""
    stats = container.data_service.data_stats()
    return {
        "status": "ready",
        "service": container.settings.SERVICE_NAME,
        "data_file_exists": stats["fileExists"],
        "templates_loaded": container.template_repo.count() > 0,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
