"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    INVALID_REQUEST = "INVALID_REQUEST"
    GRAPH_NOT_FOUND = "GRAPH_NOT_FOUND"
    GRAPH_INVALID = "GRAPH_INVALID"
    NODE_NOT_FOUND = "NODE_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_NOT_ACTIVE = "SESSION_NOT_ACTIVE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_EXPRESSION = "INVALID_EXPRESSION"
    METRICS_DISABLED = "METRICS_DISABLED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorDetail(BaseModel):
    """Field-level or item-level error information."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    code: ErrorCode
    message: str
    details: list[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Envelope for every error returned by the API."""

    error: ErrorBody
