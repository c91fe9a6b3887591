"""Configuration section models."""

from navgraph.config.models.api import APIConfig
from navgraph.config.models.engine import EngineConfig
from navgraph.config.models.observability import LoggingConfig, ObservabilityConfig
from navgraph.config.models.orchestration import OrchestrationConfig
from navgraph.config.models.storage import StorageConfig

__all__ = [
    "APIConfig",
    "EngineConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "OrchestrationConfig",
    "StorageConfig",
]
