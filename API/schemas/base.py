"""
Common response schemas.
"""

from typing import Optional
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Body of every domain error (see core.exceptions.AppError)."""
    
    success: bool = False
    message: str
    stage: Optional[str] = None


def reject_null(v):
    """For partial updates of NOT NULL columns: omit the field or send a value."""
    if v is None:
        raise ValueError("Field cannot be null")
    return v
