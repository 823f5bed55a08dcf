"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEV_API_BASE_URL = "http://intercom.dev"
PRODUCTION_API_BASE_URL = "https://api.intercom.io"
PRODUCTION_ENVIRONMENTS = frozenset({"production", "prod"})


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class UserImportSettings:
    """
    Runtime settings for the user bulk import.

    `user_model` is an optional `"module:ClassName"` path naming the record
    model to export. When unset the default `db.models.user.User` is used.
    """

    app_id: str | None = None
    api_key: str | None = None
    dev_mode: bool = False
    environment: str = "local"
    user_model: str | None = None
    timeout_seconds: float = 15.0
    ca_bundle_path: str | None = None

    @property
    def api_base_url(self) -> str:
        return DEV_API_BASE_URL if self.dev_mode else PRODUCTION_API_BASE_URL

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS

    @property
    def has_credentials(self) -> bool:
        return bool(self.app_id) and bool(self.api_key)

    def __repr__(self) -> str:
        masked_key = "***" if self.api_key else None
        return (
            f"UserImportSettings(app_id={self.app_id!r}, api_key={masked_key!r}, "
            f"dev_mode={self.dev_mode!r}, environment={self.environment!r}, "
            f"user_model={self.user_model!r}, timeout_seconds={self.timeout_seconds!r}, "
            f"ca_bundle_path={self.ca_bundle_path!r})"
        )


@lru_cache(maxsize=1)
def get_user_import_settings() -> UserImportSettings:
    """
    Return cached user import settings from environment variables.
    """

    return UserImportSettings(
        app_id=_get_optional_str_env("INTERCOM_APP_ID"),
        api_key=_get_optional_str_env("INTERCOM_API_KEY"),
        dev_mode=_get_bool_env("INTERCOM_DEV_MODE", False),
        environment=_get_str_env("ENVIRONMENT", "local"),
        user_model=_get_optional_str_env("INTERCOM_USER_MODEL"),
        timeout_seconds=max(1.0, _get_float_env("INTERCOM_HTTP_TIMEOUT_SECONDS", 15.0)),
        ca_bundle_path=_get_optional_str_env("INTERCOM_CA_BUNDLE"),
    )
