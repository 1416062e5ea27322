"""Schemas related to the OAuth callback flow."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CallbackQuery(BaseModel):
    """Query parameters that survived request validation."""

    code: str = Field(..., description="Authorization code returned by Google OAuth.")
    state: str = Field(..., description="Base64 JSON state token built by Kintone.")


class CallbackContext(BaseModel):
    """Caller context recovered from the state token."""

    return_domain: str = Field(..., description="Base URL of the Kintone domain.")
    app_id: Union[int, str] = Field(..., description="Kintone app receiving the result.")
    caller_state: Any = Field(None, description="Opaque value passed through as-is.")
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @field_validator("return_domain")
    @classmethod
    def _require_origin(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("return_domain must be an http(s) URL")
        return value

    @field_validator("app_id")
    @classmethod
    def _require_app_id(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("app_id must not be empty")
        return value


class TokenSet(BaseModel):
    """Token response from the Google token endpoint."""

    access_token: str
    refresh_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: int = 0
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.expires_in)


class UserProfile(BaseModel):
    """Subset of the Google userinfo response."""

    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None


class WebhookPayload(BaseModel):
    """Record relayed to the Zapier webhook, keyed by Kintone field codes."""

    model_config = ConfigDict(populate_by_name=True)

    customer_key: str = Field(..., alias="mail_customer_key")
    email: Optional[str] = Field(None, alias="mail_email")
    name: Optional[str] = Field(None, alias="mail_name")
    picture: Optional[str] = Field(None, alias="mail_picture")
    access_token: str = Field(..., alias="mail_access_token")
    refresh_token: Optional[str] = Field(None, alias="mail_refresh_token")
    token_type: Optional[str] = Field(None, alias="mail_token_type")
    expires_in: int = Field(..., alias="mail_expires_in")
    expires_at: str = Field(..., alias="mail_expires_at")
    created_at: str = Field(..., alias="mail_created_at")
    return_domain: str = Field(..., alias="mail_return_domain")
    app_id: Union[int, str] = Field(..., alias="mail_app_id")

    @classmethod
    def build(
        cls,
        *,
        customer_key: str,
        context: CallbackContext,
        tokens: TokenSet,
        profile: UserProfile,
    ) -> "WebhookPayload":
        """Bundle one successful exchange into a fresh payload."""
        return cls(
            customer_key=customer_key,
            email=profile.email,
            name=profile.name,
            picture=profile.picture,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            token_type=tokens.token_type,
            expires_in=tokens.expires_in,
            expires_at=tokens.expires_at.date().isoformat(),
            created_at=tokens.issued_at.date().isoformat(),
            return_domain=context.return_domain,
            app_id=context.app_id,
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = [
    "CallbackContext",
    "CallbackQuery",
    "TokenSet",
    "UserProfile",
    "WebhookPayload",
]
