"""AI orchestration configuration."""

from pydantic import BaseModel, Field


class OrchestrationConfig(BaseModel):
    """Settings for LLM-driven node selection.

    Example (config/default.toml):
        [orchestration]
        model = "openrouter/anthropic/claude-3-haiku"
        min_confidence = 0.6
    """

    enabled: bool = Field(default=True, description="Ask the LLM to pick among candidates")
    model: str = Field(default="mock/navigator", description="Primary model string")
    fallback_models: list[str] = Field(default_factory=list)
    timeout: float = Field(default=10.0, gt=0, description="Seconds before falling back")
    min_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    skip_single_candidate: bool = Field(
        default=True, description="Do not call the LLM when only one node is eligible"
    )
    history_window: int = Field(
        default=5, ge=0, description="Recent visits included in the prompt"
    )
    temperature: float = Field(default=0.0, ge=0.0, le=2.0)
    max_tokens: int = Field(default=300, gt=0)
