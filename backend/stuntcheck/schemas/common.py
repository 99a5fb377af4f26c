"""
StuntCheck Gateway — Shared Schemas
=====================================

What:  Types shared by several resources: the gender enumeration, the
       canonical error envelope, plain message responses and the health
       payload.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

# Labels used by the Indonesian frontend, accepted as aliases
_GENDER_ALIASES = {
    "male": "male",
    "laki-laki": "male",
    "l": "male",
    "female": "female",
    "perempuan": "female",
    "p": "female",
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


def normalize_gender(value: Any) -> Any:
    """
    Maps any accepted gender label to its canonical value.

    Used as a `mode="before"` validator; unknown labels are passed through
    unchanged so the enum validation reports them.
    """
    if isinstance(value, str):
        return _GENDER_ALIASES.get(value.strip().lower(), value)
    return value


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. `{"message": "Child deleted"}`."""
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "child not found",
            "request_id": "1f0c9a2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check payload returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    inference: str = Field(description="Inference service: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
