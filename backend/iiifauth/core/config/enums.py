"""Configuration enums for type-safe settings.

They inherit from str to maintain env var and JSON compatibility.
"""

from enum import Enum


class LogFormat(str, Enum):
    """Log output formats.

    TEXT is meant for local development, JSON for log shippers.
    """

    TEXT = "text"
    JSON = "json"
