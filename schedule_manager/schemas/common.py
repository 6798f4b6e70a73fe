# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared schema pieces — camelCase wire format and reusable validators.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from schedule_manager.models.domain import ensure_aware


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorDetail(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
    details: Optional[list[ErrorDetail]] = None
    request_id: Optional[str] = None


def check_repeat_days(value: Optional[list[int]]) -> Optional[list[int]]:
    if value is None:
        return None
    bad = [d for d in value if d < 0 or d > 6]
    if bad:
        raise ValueError("repeatDays values must be between 0 (Sunday) and 6 (Saturday)")
    return sorted(set(value))


def aware(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_aware(value) if value is not None else None


def dump_wire(model: BaseModel, **kwargs: Any) -> dict[str, Any]:
    """camelCase dict of the fields the client actually sent."""
    return model.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, **kwargs)
