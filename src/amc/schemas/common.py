"""Common Pydantic schemas."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class Ack(BaseModel):
    """Generic success confirmation."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: Dict[str, Any] = Field(
        ...,
        examples=[
            {
                "code": "NOT_FOUND",
                "message": "Track 7 not found",
                "details": {},
            }
        ],
    )
