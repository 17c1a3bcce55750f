"""Settings for the iiifauth package.

Values are read from environment variables (prefixed with ``IIIFAUTH_``)
and an optional ``.env`` file in the working directory.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from iiifauth.core.config.enums import LogFormat


class Settings(BaseSettings):
    """Central configuration.

    Attributes:
        LOG_LEVEL: Root level for ``iiifauth`` loggers.
        LOG_FORMAT: Text or JSON log lines.
        PESSIMISTIC_ACCESS_CONTROL: Default negotiation variant when no
            explicit options are passed.
        HTTP_TIMEOUT_SECONDS: Per-request timeout for the httpx fetcher.
        HTTP_USER_AGENT: User-Agent header sent with every fetch.
        HTTP_MAX_CONNECTIONS: Connection pool size for the httpx fetcher.
    """

    model_config = SettingsConfigDict(
        env_prefix="IIIFAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    LOG_LEVEL: str = Field(default="INFO", description="Logging level name")
    LOG_FORMAT: LogFormat = Field(default=LogFormat.TEXT, description="Log line format")

    PESSIMISTIC_ACCESS_CONTROL: bool = Field(
        default=False,
        description="Re-run login for every access-controlled resource instead of reusing tokens",
    )

    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, description="Request timeout")
    HTTP_USER_AGENT: str = Field(
        default="iiifauth/0.1",
        min_length=1,
        description="User-Agent for resource requests",
    )
    HTTP_MAX_CONNECTIONS: int = Field(default=20, ge=1, le=500, description="Pool size")
