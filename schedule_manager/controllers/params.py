# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared path-parameter checks for controllers.
"""

import uuid

from fastapi import HTTPException


def require_uuid(value: str, kind: str) -> str:
    """Reject non-UUID ids with 400 before they reach a service."""
    try:
        uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {kind} ID format")
    return value
