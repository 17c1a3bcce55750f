"""Configuration module.

Usage:
    from iiifauth.core.config import settings

    if settings.PESSIMISTIC_ACCESS_CONTROL:
        ...
"""

from iiifauth.core.config.enums import LogFormat
from iiifauth.core.config.settings import Settings

__all__ = [
    "LogFormat",
    "Settings",
    "settings",
]

# Singleton settings instance
settings = Settings()
