"""Common model types shared across modules."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable codes for every failure a check can report."""

    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    REGISTRY_UNAVAILABLE = "REGISTRY_UNAVAILABLE"
    REQUEST_FAILED = "REQUEST_FAILED"
    UNSUPPORTED_AUTH_SCHEME = "UNSUPPORTED_AUTH_SCHEME"
    MISSING_REALM = "MISSING_REALM"
    TOKEN_EXCHANGE_FAILED = "TOKEN_EXCHANGE_FAILED"
    NO_NEWER_TAG = "NO_NEWER_TAG"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    INVALID_TAG = "INVALID_TAG"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    MISSING_DIGEST = "MISSING_DIGEST"
    CONFIG_ERROR = "CONFIG_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CheckError(BaseModel):
    """Represents an error that occurred while checking an image."""

    model_config = {"frozen": True}

    code: ErrorCode = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional error context",
    )

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"
