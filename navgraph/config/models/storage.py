"""Storage configuration."""

from typing import Literal

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Store backends and graph preloading."""

    backend: Literal["inmemory"] = Field(default="inmemory")
    graph_dir: str | None = Field(
        default=None, description="Directory of TOML/JSON graph files loaded at startup"
    )
