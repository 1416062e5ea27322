"""
Application configuration models and helpers.

Every value the callback flow depends on is resolved here once per process,
so the handlers never read the environment mid-request.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

import os

from pydantic import AnyHttpUrl, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class GoogleSettings(BaseSettings):
    """Configuration required for the Google token and profile endpoints."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    client_id: str = Field(..., alias="GOOGLE_CLIENT_ID")
    client_secret: SecretStr = Field(..., alias="GOOGLE_CLIENT_SECRET")
    redirect_uri: AnyHttpUrl = Field(..., alias="GOOGLE_REDIRECT_URI")
    local_redirect_uri: Optional[AnyHttpUrl] = Field(
        None,
        alias="GOOGLE_LOCAL_REDIRECT_URI",
        description="Redirect URI registered for local development.",
    )
    token_url: str = Field(
        "https://oauth2.googleapis.com/token", alias="GOOGLE_TOKEN_URL"
    )
    userinfo_url: str = Field(
        "https://www.googleapis.com/oauth2/v1/userinfo", alias="GOOGLE_USERINFO_URL"
    )

    def redirect_uri_for(self, environment: str) -> str:
        """Return the redirect URI registered for ``environment``."""
        if environment == "local" and self.local_redirect_uri is not None:
            return str(self.local_redirect_uri)
        return str(self.redirect_uri)


class WebhookSettings(BaseSettings):
    """Outbound Zapier webhook used to sync credentials into Kintone."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    url: Optional[str] = Field(None, alias="ZAPIER_WEBHOOK_URL")
    placeholder_token: Optional[str] = Field(
        None,
        alias="ZAPIER_PLACEHOLDER_TOKEN",
        description="URLs containing this token are treated as unconfigured.",
    )

    @property
    def enabled(self) -> bool:
        if not self.url:
            return False
        if self.placeholder_token and self.placeholder_token in self.url:
            return False
        return True


class OAuthSettings(BaseSettings):
    """Callback flow configuration."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    test_code: str = Field("test", alias="OAUTH_TEST_CODE")
    test_customer_key: str = Field(
        "test_customer_key_12345", alias="OAUTH_TEST_CUSTOMER_KEY"
    )
    error_fallback_url: str = Field("about:blank", alias="OAUTH_ERROR_FALLBACK_URL")
    app_path: str = Field("k", alias="KINTONE_APP_PATH")
    customer_key_strategy: Literal["subdomain", "random"] = Field(
        "subdomain", alias="CUSTOMER_KEY_STRATEGY"
    )
    http_timeout_seconds: float = Field(10.0, alias="HTTP_TIMEOUT_SECONDS")

    @field_validator("app_path")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        """Allow the path segment to be configured as ``/k/`` or ``k``."""
        return value.strip("/")


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="APP_LOG_LEVEL")
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)

    @property
    def redirect_uri(self) -> str:
        return self.google.redirect_uri_for(self.environment)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "GoogleSettings",
    "OAuthSettings",
    "WebhookSettings",
    "get_settings",
]
