# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas for schedule templates.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from schedule_manager.models.domain import (
    CATEGORY_PATTERN,
    DESCRIPTION_MAX_LENGTH,
    MAX_DURATION_MINUTES,
    MAX_REPEAT_INTERVAL,
    MIN_DURATION_MINUTES,
    PRIORITY_PATTERN,
    REPEAT_TYPE_PATTERN,
    TITLE_MAX_LENGTH,
)
from schedule_manager.schemas.common import CamelModel, aware, check_repeat_days, dump_wire


class TemplateCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: str = Field(..., pattern=CATEGORY_PATTERN)
    priority: str = Field(..., pattern=PRIORITY_PATTERN)
    duration: int = Field(
        ...,
        ge=MIN_DURATION_MINUTES,
        le=MAX_DURATION_MINUTES,
        description="Duration in minutes (1-1440)",
    )
    tags: Optional[list[str]] = None
    repeat_type: Optional[str] = Field(default=None, pattern=REPEAT_TYPE_PATTERN)
    repeat_interval: Optional[int] = Field(default=None, ge=1, le=MAX_REPEAT_INTERVAL)
    repeat_days: Optional[list[int]] = None

    @field_validator("repeat_days")
    @classmethod
    def validate_repeat_days(cls, v: Optional[list[int]]) -> Optional[list[int]]:
        return check_repeat_days(v)

    def to_record(self) -> dict[str, Any]:
        return dump_wire(self)


class TemplateUpdateRequest(CamelModel):
    """Partial update model for PUT /api/templates/{id}."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    category: Optional[str] = Field(default=None, pattern=CATEGORY_PATTERN)
    priority: Optional[str] = Field(default=None, pattern=PRIORITY_PATTERN)
    duration: Optional[int] = Field(
        default=None, ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES
    )
    tags: Optional[list[str]] = None
    repeat_type: Optional[str] = Field(default=None, pattern=REPEAT_TYPE_PATTERN)
    repeat_interval: Optional[int] = Field(default=None, ge=1, le=MAX_REPEAT_INTERVAL)
    repeat_days: Optional[list[int]] = None

    @field_validator("repeat_days")
    @classmethod
    def validate_repeat_days(cls, v: Optional[list[int]]) -> Optional[list[int]]:
        return check_repeat_days(v)

    def to_changes(self) -> dict[str, Any]:
        return dump_wire(self)


class TemplateDuplicateRequest(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)


class TemplateUseRequest(CamelModel):
    start_date: datetime
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("start_date")
    @classmethod
    def normalise_start(cls, v: datetime) -> datetime:
        return aware(v)


class TemplateFromScheduleRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)


class TemplateOut(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    priority: str
    duration: int
    tags: Optional[list[str]] = None
    repeat_type: Optional[str] = None
    repeat_interval: Optional[int] = None
    repeat_days: Optional[list[int]] = None
    created_at: str
    updated_at: str


class TemplateResponse(CamelModel):
    data: TemplateOut
    message: Optional[str] = None


class TemplateListResponse(CamelModel):
    data: list[TemplateOut]
    total: int
