# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas for schedules — API contract definitions.
Pydantic models used at the controller (HTTP) boundary, plus the record
validator the import path reuses.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from schedule_manager.models.domain import (
    CATEGORY_PATTERN,
    DESCRIPTION_MAX_LENGTH,
    MAX_REPEAT_INTERVAL,
    PRIORITY_PATTERN,
    REPEAT_TYPE_PATTERN,
    TITLE_MAX_LENGTH,
    to_iso,
)
from schedule_manager.schemas.common import CamelModel, aware, check_repeat_days, dump_wire


# ── Schedule Requests ──

class ScheduleCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: datetime
    end_date: datetime
    category: str = Field(..., pattern=CATEGORY_PATTERN)
    priority: str = Field(..., pattern=PRIORITY_PATTERN)
    tags: Optional[list[str]] = None
    repeat_type: Optional[str] = Field(default=None, pattern=REPEAT_TYPE_PATTERN)
    repeat_interval: Optional[int] = Field(default=None, ge=1, le=MAX_REPEAT_INTERVAL)
    repeat_end_date: Optional[datetime] = None
    repeat_days: Optional[list[int]] = None

    @field_validator("start_date", "end_date", "repeat_end_date")
    @classmethod
    def normalise_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return aware(v)

    @field_validator("repeat_days")
    @classmethod
    def validate_repeat_days(cls, v: Optional[list[int]]) -> Optional[list[int]]:
        return check_repeat_days(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "ScheduleCreateRequest":
        if self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        return self

    def to_record(self) -> dict[str, Any]:
        return dump_wire(self)


class ScheduleUpdateRequest(CamelModel):
    """Partial update for PUT /api/schedules/{id}. Repeat settings are not editable."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category: Optional[str] = Field(default=None, pattern=CATEGORY_PATTERN)
    priority: Optional[str] = Field(default=None, pattern=PRIORITY_PATTERN)
    is_completed: Optional[bool] = None
    tags: Optional[list[str]] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalise_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return aware(v)

    @model_validator(mode="after")
    def end_after_start(self) -> "ScheduleUpdateRequest":
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        return self

    def to_changes(self) -> dict[str, Any]:
        return dump_wire(self)


class BulkDeleteRequest(CamelModel):
    ids: list[str] = Field(..., min_length=1)


class ScheduleImportRequest(CamelModel):
    schedules: list[Any]


class ScheduleImportRecord(ScheduleCreateRequest):
    """One exported schedule as accepted by the import endpoint."""

    id: Optional[str] = None
    is_completed: bool = False
    parent_id: Optional[str] = None
    is_recurring: Optional[bool] = None

    def to_schedule(self) -> dict[str, Any]:
        record = dump_wire(self, exclude={"id"})
        record["isCompleted"] = self.is_completed
        for key in ("startDate", "endDate", "repeatEndDate"):
            if key in record:
                record[key] = to_iso(record[key])
        return record


# ── Schedule Responses ──

class ScheduleOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    start_date: str
    end_date: str
    category: str
    priority: str
    is_completed: bool
    tags: Optional[list[str]] = None
    created_at: str
    updated_at: str
    repeat_type: Optional[str] = None
    repeat_interval: Optional[int] = None
    repeat_end_date: Optional[str] = None
    repeat_days: Optional[list[int]] = None
    parent_id: Optional[str] = None
    is_recurring: Optional[bool] = None


class ScheduleResponse(CamelModel):
    data: ScheduleOut
    message: Optional[str] = None


class ScheduleListResponse(CamelModel):
    data: list[ScheduleOut]
    total: int


class BulkDeleteResult(CamelModel):
    deleted_count: int
    errors: list[str]


class ImportResult(CamelModel):
    imported_count: int
    error_count: int
    errors: list[str]
    imported_at: str


# ── Analytics ──

class BucketStats(CamelModel):
    total: int
    completed: int
    remaining: int


class AnalyticsSummary(CamelModel):
    total: int
    completed: int
    completion_rate: int
    overdue: int
    today: BucketStats
    this_week: BucketStats
    this_month: BucketStats


class CompletionTrendPoint(CamelModel):
    date: str
    total: int
    completed: int
    completion_rate: int


class MonthlyTrendPoint(CamelModel):
    month: str
    count: int
    completed: int


class AnalyticsReport(CamelModel):
    summary: AnalyticsSummary
    category_distribution: dict[str, int]
    priority_distribution: dict[str, int]
    completion_trend: list[CompletionTrendPoint]
    monthly_trend: list[MonthlyTrendPoint]
    generated_at: str


class AnalyticsResponse(CamelModel):
    data: AnalyticsReport
    message: Optional[str] = None
