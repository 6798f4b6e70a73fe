# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Template endpoints — CRUD, duplicate, use, create-from-schedule.
Thin HTTP layer: delegates ALL logic to the services.
"""

from fastapi import APIRouter, Depends, HTTPException, Path

from schedule_manager.controllers.params import require_uuid
from schedule_manager.core.dependencies import get_schedule_service, get_template_service
from schedule_manager.models.domain import CATEGORY_PATTERN
from schedule_manager.schemas.schedule import ScheduleResponse
from schedule_manager.schemas.template import (
    TemplateCreateRequest,
    TemplateDuplicateRequest,
    TemplateFromScheduleRequest,
    TemplateListResponse,
    TemplateResponse,
    TemplateUpdateRequest,
    TemplateUseRequest,
)
from schedule_manager.services.schedule_service import ScheduleService
from schedule_manager.services.template_service import TemplateService

router = APIRouter(prefix="/api", tags=["Templates"])

NOT_FOUND = "Template not found"


@router.get("/templates", response_model=TemplateListResponse)
def list_templates(service: TemplateService = Depends(get_template_service)):
    """List all templates sorted by name."""
    templates = service.list_templates()
    return {"data": templates, "total": len(templates)}


@router.get("/templates/category/{category}", response_model=TemplateListResponse)
def list_templates_by_category(
    category: str = Path(..., pattern=CATEGORY_PATTERN),
    service: TemplateService = Depends(get_template_service),
):
    templates = service.list_by_category(category)
    return {"data": templates, "total": len(templates)}


@router.post(
    "/templates/from-schedule/{schedule_id}",
    status_code=201,
    response_model=TemplateResponse,
)
def create_template_from_schedule(
    schedule_id: str,
    payload: TemplateFromScheduleRequest,
    schedules: ScheduleService = Depends(get_schedule_service),
):
    """Capture an existing schedule's settings as a new template."""
    template = schedules.create_template_from_schedule(
        require_uuid(schedule_id, "schedule"), payload.name
    )
    if template is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return {"data": template, "message": "Template created from schedule"}


@router.get("/templates/{template_id}", response_model=TemplateResponse)
def get_template(
    template_id: str,
    service: TemplateService = Depends(get_template_service),
):
    template = service.get_template(require_uuid(template_id, "template"))
    if template is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": template}


@router.post("/templates", status_code=201, response_model=TemplateResponse)
def create_template(
    payload: TemplateCreateRequest,
    service: TemplateService = Depends(get_template_service),
):
    return {"data": service.create_template(payload.to_record()), "message": "Template created"}


@router.put("/templates/{template_id}", response_model=TemplateResponse)
def update_template(
    template_id: str,
    payload: TemplateUpdateRequest,
    service: TemplateService = Depends(get_template_service),
):
    """Partially update a template."""
    template = service.update_template(require_uuid(template_id, "template"), payload.to_changes())
    if template is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": template, "message": "Template updated"}


@router.delete("/templates/{template_id}")
def delete_template(
    template_id: str,
    service: TemplateService = Depends(get_template_service),
):
    if not service.delete_template(require_uuid(template_id, "template")):
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"status": "deleted", "id": template_id, "message": "Template deleted"}


@router.post("/templates/{template_id}/duplicate", status_code=201, response_model=TemplateResponse)
def duplicate_template(
    template_id: str,
    payload: TemplateDuplicateRequest | None = None,
    service: TemplateService = Depends(get_template_service),
):
    new_name = payload.name if payload else None
    template = service.duplicate_template(require_uuid(template_id, "template"), new_name)
    if template is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": template, "message": "Template duplicated"}


@router.post("/templates/{template_id}/use", status_code=201, response_model=ScheduleResponse)
def use_template(
    template_id: str,
    payload: TemplateUseRequest,
    schedules: ScheduleService = Depends(get_schedule_service),
):
    """Create a single (non-repeating) schedule from a template."""
    schedule = schedules.create_from_template(
        require_uuid(template_id, "template"),
        start_date=payload.start_date,
        title=payload.title,
        description=payload.description,
    )
    if schedule is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return {"data": schedule, "message": "Schedule created from template"}
