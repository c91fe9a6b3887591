"""Graph engine configuration."""

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Settings for eligibility evaluation and graph traversal."""

    eligibility_cache_enabled: bool = Field(
        default=True, description="Cache eligibility results per context version"
    )
    eligibility_cache_ttl_seconds: float = Field(
        default=30.0, gt=0, description="Lifetime of a cached eligibility result"
    )
    eligibility_cache_max_entries: int = Field(
        default=10_000, gt=0, description="Entries kept before oldest are evicted"
    )
    max_composite_depth: int = Field(
        default=8, gt=0, description="Nesting limit when resolving composite entries"
    )
    warn_on_unreachable: bool = Field(
        default=True, description="Report unreachable nodes as validation warnings"
    )
