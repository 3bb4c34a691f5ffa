"""Library settings loaded from the environment.

Env vars use the ``OAUTHKIT_`` prefix, e.g. ``OAUTHKIT_LOG_LEVEL=DEBUG``.
Per-client values (keys, secrets, callback) never live here; they are passed
to each service through :class:`oauthkit.domains.oauth.types.OAuthConfig`.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oauthkit.core.config.enums import LogFormat


class Settings(BaseSettings):
    """Process-wide tunables for oauthkit."""

    model_config = SettingsConfigDict(
        env_prefix="OAUTHKIT_",
        extra="ignore",
        frozen=True,
    )

    LOG_LEVEL: str = Field("INFO", description="Level for the oauthkit logger")
    LOG_FORMAT: LogFormat = Field(LogFormat.TEXT, description="Rendering of log records")

    NONCE_BYTES: int = Field(16, description="Random bytes per OAuth 1.0a nonce")
    OUT_OF_BAND_CALLBACK: str = Field(
        "oob", description="oauth_callback value sent when no callback URL is configured"
    )

    CONSUMED_TOKEN_HISTORY: int = Field(
        1024,
        ge=1,
        description="Exchanged 1.0a request tokens remembered per service to reject reuse",
    )

    HTTP_TIMEOUT_SECONDS: float = Field(
        30.0, description="Timeout applied by the httpx transport adapters"
    )

    @field_validator("NONCE_BYTES")
    @classmethod
    def check_nonce_bytes(cls, v: int) -> int:
        """Reject nonces too short to be unique within a provider's replay window."""
        if v < 8:
            raise ValueError("NONCE_BYTES must be at least 8.")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level name so it matches the logging module constants."""
        return v.upper()
