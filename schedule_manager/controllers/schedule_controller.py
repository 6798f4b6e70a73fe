# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Schedule endpoints — CRUD, bulk delete, analytics, export/import.
Thin HTTP layer: delegates ALL logic to the services.

Static paths (analytics, stats, export, bulk, all) are registered before
``/schedules/{schedule_id}`` so they are not captured by it.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.responses import Response

from schedule_manager.controllers.params import require_uuid
from schedule_manager.core.dependencies import (
    Container,
    get_container,
    get_data_service,
    get_schedule_service,
)
from schedule_manager.models.domain import CATEGORY_PATTERN, PRIORITY_PATTERN
from schedule_manager.schemas.schedule import (
    AnalyticsResponse,
    BulkDeleteRequest,
    BulkDeleteResult,
    ImportResult,
    ScheduleCreateRequest,
    ScheduleImportRequest,
    ScheduleListResponse,
    ScheduleResponse,
    ScheduleUpdateRequest,
)
from schedule_manager.services.data_service import DataService
from schedule_manager.services.schedule_service import ScheduleQuery, ScheduleService

router = APIRouter(prefix="/api", tags=["Schedules"])

NOT_FOUND = "Schedule not found"


def _split_tags(tags: Optional[list[str]]) -> list[str]:
    if not tags:
        return []
    return [t.strip() for raw in tags for t in raw.split(",") if t.strip()]


# ── Collection queries ──

@router.get("/schedules", response_model=ScheduleListResponse)
def list_schedules(
    category: Optional[str] = Query(default=None, pattern=CATEGORY_PATTERN),
    priority: Optional[str] = Query(default=None, pattern=PRIORITY_PATTERN),
    is_completed: Optional[bool] = Query(default=None, alias="isCompleted"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    search: Optional[str] = None,
    tags: Optional[list[str]] = Query(default=None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """List schedules, filtered and sorted by start date."""
    query = ScheduleQuery(
        category=category,
        priority=priority,
        is_completed=is_completed,
        start_date=start_date,
        end_date=end_date,
        search=search,
        tags=_split_tags(tags),
    )
    schedules = service.list_schedules(query)
    return {"data": schedules, "total": len(schedules)}


@router.get("/schedules/analytics", response_model=AnalyticsResponse)
def get_analytics(service: ScheduleService = Depends(get_schedule_service)):
    """Summary counts, distributions and trends over all schedules."""
    return {"data": service.get_statistics(), "message": "Analytics generated"}


@router.get("/schedules/stats")
def get_data_stats(data_service: DataService = Depends(get_data_service)):
    """Data-file statistics."""
    return {"data": data_service.data_stats()}


@router.get("/schedules/export/json")
def export_json(data_service: DataService = Depends(get_data_service)):
    export = data_service.export_json()
    export["message"] = f"Exported {export['total']} schedules"
    return export


@router.get("/schedules/export/csv")
def export_csv(
    data_service: DataService = Depends(get_data_service),
    container: Container = Depends(get_container),
):
    filename = f"schedules-export-{container.clock().date().isoformat()}.csv"
    return Response(
        content=data_service.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/schedules/import", response_model=ImportResult)
def import_schedules(
    payload: ScheduleImportRequest,
    data_service: DataService = Depends(get_data_service),
):
    """Best-effort import: each record is validated and created independently."""
    return data_service.import_schedules(payload.schedules)


# ── Bulk commands ──

@router.delete("/schedules/bulk", response_model=BulkDeleteResult)
def delete_schedules_bulk(
    payload: BulkDeleteRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.delete_schedules(payload.ids)


@router.delete("/schedules/all")
def delete_all_schedules(service: ScheduleService = Depends(get_schedule_service)):
    result = service.delete_all()
    return {**result, "message": f"Deleted {result['deletedCount']} schedules"}


# ── Single schedule ──

@router.post("/schedules", status_code=201, response_model=ScheduleResponse)
def create_schedule(
    payload: ScheduleCreateRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Create a schedule; repeating schedules also get their occurrences."""
    try:
        schedule = service.create_schedule(payload.to_record())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": schedule, "message": "Schedule created"}


@router.get("/schedules/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = service.get_schedule(require_uuid(schedule_id, "schedule"))
    if schedule is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": schedule}


@router.put("/schedules/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: str,
    payload: ScheduleUpdateRequest,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Partially update a schedule. Repeat settings are left untouched."""
    try:
        schedule = service.update_schedule(require_uuid(schedule_id, "schedule"), payload.to_changes())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if schedule is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": schedule, "message": "Schedule updated"}


@router.delete("/schedules/{schedule_id}")
def delete_schedule(
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    if not service.delete_schedule(require_uuid(schedule_id, "schedule")):
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"status": "deleted", "id": schedule_id, "message": "Schedule deleted"}
