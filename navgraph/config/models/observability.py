"""Observability configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """structlog settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    redact_pii: bool = True
    extra_sensitive_keys: list[str] = Field(default_factory=list)


class ObservabilityConfig(BaseModel):
    """Logging and metrics settings."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics_enabled: bool = Field(default=True, description="Expose /metrics")
