# fereai/config.py
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal, Mapping

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fereai.errors import MissingConfigurationError

DEFAULT_HOST = "api.fereai.xyz"

_SCHEME = re.compile(r"^(?:https?|wss?)://", re.I)


class Settings(BaseSettings):
    """
    Central configuration for the provider (Pydantic v2).
    Loads from environment variables and a .env file (if present).
    """

    # --- Runtime ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", alias="LOG_LEVEL")

    # --- FereAI credentials / host ---
    api_key: str | None = Field(default=None, alias="FEREAI_API_KEY")
    user_id: str | None = Field(default=None, alias="FEREAI_USER_ID")
    base_url: str | None = Field(default=None, alias="FEREAI_BASE_URL")

    # --- Callers (API / CLI) ---
    default_agent: str = Field("ProAgent", alias="FEREAI_DEFAULT_AGENT")
    request_timeout: float = Field(120.0, gt=0, alias="FEREAI_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,  # FEREAI_API_KEY="" counts as unset
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings instance so every import doesn’t re-parse the env."""
    return Settings()


def normalize_host(base_url: str | None) -> str | None:
    """Strip scheme and trailing slashes: 'https://api.fereai.xyz/' -> 'api.fereai.xyz'."""
    if not base_url:
        return None
    host = _SCHEME.sub("", base_url.strip()).rstrip("/")
    return host or None


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved, read-only credentials and host shared by every call of a provider."""

    api_key: str | None
    user_id: str | None
    host: str | None

    def missing(self) -> list[str]:
        return [name for name in ("api_key", "user_id", "host") if not getattr(self, name)]

    def require(self) -> ProviderConfig:
        missing = self.missing()
        if missing:
            raise MissingConfigurationError(missing)
        return self


def _first(*values: str | None) -> str | None:
    for v in values:
        if v:
            return v
    return None


def resolve_config(
    defaults: Mapping[str, str | None] | None = None,
    overrides: Mapping[str, str | None] | None = None,
    settings: Settings | None = None,
) -> ProviderConfig:
    """
    Resolve api_key / user_id / host once.

    Precedence per key: explicit override > environment > constructor default.
    Empty strings never win. The host falls back to DEFAULT_HOST.
    """
    defaults = defaults or {}
    overrides = overrides or {}
    settings = settings or Settings()

    host_default = defaults.get("base_url") or DEFAULT_HOST
    return ProviderConfig(
        api_key=_first(overrides.get("api_key"), settings.api_key, defaults.get("api_key")),
        user_id=_first(overrides.get("user_id"), settings.user_id, defaults.get("user_id")),
        host=normalize_host(
            _first(overrides.get("base_url"), settings.base_url, host_default)
        ),
    )
