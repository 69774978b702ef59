"""Shared Pydantic models and parameters used across route modules."""

from typing import Annotated

from fastapi import Query
from pydantic import BaseModel

from src.constants import ALL


class ErrorResponse(BaseModel):
    """Standard error response model for all API endpoints.

    Attributes:
        detail: Human-readable error message.
        error_code: Optional machine-readable error code.
    """

    detail: str
    error_code: str | None = None


AngleParam = Annotated[
    str,
    Query(
        min_length=1,
        description='Wall angle label, or "all" to merge every angle',
        examples=[ALL, "40"],
    ),
]

GradeParam = Annotated[
    str,
    Query(
        min_length=1,
        description='Grade label, or "all" to sum every grade',
        examples=[ALL, "V4"],
    ),
]
