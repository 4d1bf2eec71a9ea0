"""Configuration loading for threadview.

Settings come from TOML layers in the config directory, overridden by
THREADVIEW_* environment variables.

Usage:
    from threadview.config import get_settings

    settings = get_settings()
    base_url = settings.backend.base_url
    marker = settings.engine.ingestion_marker
"""

from functools import lru_cache

from threadview.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read on first use.

    Call `reload_settings()` after changing the files or the environment.
    """
    return Settings()


def reload_settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
