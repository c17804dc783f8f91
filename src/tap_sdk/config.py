"""Process-wide configuration surface for the Tap SDK."""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["debug", "info", "error"]


class TapSettings(BaseSettings):
    """Defaults used by every request unless a call overrides them."""

    # Credentials
    api_key: Optional[str] = None
    tap_version: Optional[str] = None

    # Endpoint
    api_base: str = "https://api.tap.company"

    # Network
    open_timeout: float = Field(default=30.0, gt=0)
    read_timeout: float = Field(default=80.0, gt=0)

    # Retries are opt-in
    max_network_retries: int = Field(default=0, ge=0)
    initial_network_retry_delay: float = Field(default=0.5, gt=0)
    max_network_retry_delay: float = Field(default=2.0, gt=0)

    # Logging
    log_level: Optional[LogLevel] = None
    logger: Optional[Any] = Field(default=None, exclude=True)

    model_config = SettingsConfigDict(
        env_prefix="TAP_",
        env_file=".env",
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept upper-case level names from the environment."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v

    @field_validator("api_base")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


_settings: Optional[TapSettings] = None


def get_settings() -> TapSettings:
    """Return the active settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = TapSettings()
    return _settings


def configure(**changes: Any) -> TapSettings:
    """Replace the active settings with a validated copy carrying ``changes``.

    Example:
        ```python
        import tap_sdk

        tap_sdk.configure(api_key="sk_test_XKokBfNWv6FIYuTMg5sLPjhJ", max_network_retries=2)
        ```
    """
    global _settings
    current = get_settings().model_dump()
    current["logger"] = get_settings().logger
    current.update(changes)
    _settings = TapSettings.model_validate(current)
    return _settings


def reset_settings() -> None:
    """Forget the active settings so the next read reloads the environment."""
    global _settings
    _settings = None


__all__ = [
    "LogLevel",
    "TapSettings",
    "configure",
    "get_settings",
    "reset_settings",
]
