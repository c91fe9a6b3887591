"""Configuration loading for NavGraph.

Usage:
    from navgraph.config import get_settings

    settings = get_settings()
    ttl = settings.engine.eligibility_cache_ttl_seconds
"""

from functools import lru_cache

from navgraph.config.loader import load_config
from navgraph.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings for the lifetime of the process.

    Call `get_settings.cache_clear()` or `reload_settings()` to reload.
    """
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
