"""Health check models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ComponentHealth(BaseModel):
    name: str
    status: Literal["healthy", "unhealthy"]
    detail: str | None = None


class HealthResponse(BaseModel):
    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime
    components: list[ComponentHealth] = Field(default_factory=list)
