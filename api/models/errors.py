"""
Error Response Models

Shapes of the JSON bodies returned by failing scanner API requests.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body shared by every failing request.
    """
    status: str = Field(
        default="error",
        description="Always 'error'"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    error_code: str = Field(
        ...,
        description="Machine-readable error code, e.g. HTTP_404 or STORAGE_ERROR"
    )
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error context"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Time the error was produced (UTC)"
    )


class ValidationErrorItem(BaseModel):
    """One rejected request field."""
    loc: List[str] = Field(..., description="Field path")
    msg: str = Field(..., description="Validation message")
    type: str = Field(..., description="Validation error type")


class ValidationErrorResponse(ErrorResponse):
    """
    Error body for rejected request payloads and query parameters.
    """
    validation_errors: List[ValidationErrorItem] = Field(
        ...,
        description="Field-level validation failures"
    )
