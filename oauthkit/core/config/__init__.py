"""Configuration module for oauthkit.

Usage:
    from oauthkit.core.config import settings, LogFormat

    if settings.LOG_FORMAT == LogFormat.JSON:
        ...
"""

from oauthkit.core.config.enums import LogFormat
from oauthkit.core.config.settings import Settings

__all__ = [
    "Settings",
    "LogFormat",
    "settings",
]

# Frozen settings instance
settings = Settings()
