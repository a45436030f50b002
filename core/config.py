"""Application configuration via Pydantic Settings v2."""

import os
from functools import lru_cache
from typing import Protocol

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENCRYPTION_KEY_VAR = "EMAIL_ENCRYPTION_KEY"


class Settings(BaseSettings):
    """Process-wide settings loaded from env vars and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Required ===
    supabase_url: str
    supabase_service_role_key: SecretStr

    # === Optional ===
    supabase_anon_key: SecretStr = SecretStr("")

    # === Defaults ===
    log_level: str = "INFO"

    @field_validator("supabase_url")
    @classmethod
    def _supabase_url_must_be_https(cls, v: str) -> str:
        if not v.startswith("https://"):
            msg = "SUPABASE_URL must start with https://"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance (cached after first call)."""
    return Settings()  # type: ignore[call-arg]


class SecretProvider(Protocol):
    """Source of named secrets, consulted at call time."""

    def get_secret(self, name: str) -> str | None: ...


class EnvSecretProvider:
    """Reads secrets straight from os.environ on every lookup.

    Nothing is cached, so rotating a value in the environment takes effect
    on the next call without a restart.
    """

    def get_secret(self, name: str) -> str | None:
        value = os.environ.get(name)
        return value or None


class StaticSecretProvider:
    """In-memory provider for scripts and tests."""

    def __init__(self, secrets: dict[str, str] | None = None) -> None:
        self._secrets = dict(secrets or {})

    def set(self, name: str, value: str) -> None:
        self._secrets[name] = value

    def unset(self, name: str) -> None:
        self._secrets.pop(name, None)

    def get_secret(self, name: str) -> str | None:
        return self._secrets.get(name) or None
