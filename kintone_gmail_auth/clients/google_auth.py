"""
Google OAuth utilities.

These helpers decode the state token Kintone hands to Google and complete the
authorization-code leg of the flow: code exchange followed by a profile fetch.
Every method reports failure as an ``Err`` so the callback flow can route it.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from kintone_gmail_auth.core.config import GoogleSettings
from kintone_gmail_auth.core.errors import (
    CallbackFailure,
    invalid_state,
    profile_fetch_failed,
    token_exchange_failed,
)
from kintone_gmail_auth.core.logging import mask_secret
from kintone_gmail_auth.core.result import Err, Ok, Result
from kintone_gmail_auth.schemas.auth import CallbackContext, TokenSet, UserProfile

logger = logging.getLogger(__name__)


def _b64decode(token: str) -> bytes:
    """Decode standard or URL-safe base64, tolerating stripped padding."""
    normalized = token.strip().replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    return base64.b64decode(normalized, validate=True)


def _describe_validation_error(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


class OAuthStateCodec:
    """Encode and decode the base64 JSON state token used by Kintone."""

    def encode(self, return_domain: str, app_id: int | str, state: Any = None) -> str:
        serialized = json.dumps(
            {"return_domain": return_domain, "app_id": app_id, "state": state},
            separators=(",", ":"),
            ensure_ascii=False,
        )
        return base64.b64encode(serialized.encode("utf-8")).decode("ascii")

    def decode(self, token: str) -> Result[CallbackContext, CallbackFailure]:
        try:
            decoded = _b64decode(token)
        except (binascii.Error, ValueError) as exc:
            return Err(invalid_state(f"State is not valid base64: {exc}"))

        try:
            payload = json.loads(decoded.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            return Err(invalid_state(f"State is not valid JSON: {exc}"))

        if not isinstance(payload, dict):
            return Err(invalid_state("State must decode to a JSON object."))

        try:
            context = CallbackContext(
                return_domain=payload.get("return_domain"),
                app_id=payload.get("app_id"),
                caller_state=payload.get("state"),
                raw=payload,
            )
        except ValidationError as exc:
            return Err(invalid_state(_describe_validation_error(exc)))
        return Ok(context)


class GoogleOAuthClient:
    """Exchange authorization codes and read the signed-in user's profile."""

    def __init__(
        self,
        google_settings: GoogleSettings,
        redirect_uri: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._google = google_settings
        self._redirect_uri = redirect_uri
        self._timeout = timeout
        self._transport = transport

    @property
    def redirect_uri(self) -> str:
        return self._redirect_uri

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def exchange_authorization_code(
        self, code: str
    ) -> Result[TokenSet, CallbackFailure]:
        """Exchange an authorization code for a token set."""
        payload = {
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret.get_secret_value(),
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self._redirect_uri,
        }
        logger.info(
            "Requesting tokens (client_id=%s, redirect_uri=%s)",
            mask_secret(self._google.client_id, visible=20),
            self._redirect_uri,
        )

        try:
            async with self._http() as client:
                response = await client.post(self._google.token_url, data=payload)
        except httpx.HTTPError as exc:
            return Err(token_exchange_failed(f"Token request failed: {exc!r}"))

        if not response.is_success:
            return Err(
                token_exchange_failed(
                    f"Token endpoint returned {response.status_code}: {response.text}"
                )
            )

        try:
            token_payload = response.json()
        except ValueError:
            return Err(token_exchange_failed("Token endpoint returned a non-JSON body."))

        if not isinstance(token_payload, dict) or not token_payload.get("access_token"):
            return Err(
                token_exchange_failed("Token response did not include an access token.")
            )

        try:
            tokens = TokenSet(
                access_token=token_payload["access_token"],
                refresh_token=token_payload.get("refresh_token"),
                token_type=token_payload.get("token_type"),
                expires_in=int(token_payload.get("expires_in") or 0),
            )
        except (TypeError, ValueError) as exc:
            return Err(token_exchange_failed(f"Malformed token response: {exc}"))

        logger.info(
            "Access token obtained (keys=%s)", sorted(token_payload.keys())
        )
        return Ok(tokens)

    async def fetch_user_profile(
        self, access_token: str
    ) -> Result[UserProfile, CallbackFailure]:
        """Fetch the profile of the user who granted consent."""
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with self._http() as client:
                response = await client.get(self._google.userinfo_url, headers=headers)
        except httpx.HTTPError as exc:
            return Err(profile_fetch_failed(f"Profile request failed: {exc!r}"))

        if not response.is_success:
            return Err(
                profile_fetch_failed(
                    f"Profile endpoint returned {response.status_code}: {response.text}"
                )
            )

        try:
            profile_payload = response.json()
        except ValueError:
            return Err(profile_fetch_failed("Profile endpoint returned a non-JSON body."))

        if not isinstance(profile_payload, dict):
            return Err(profile_fetch_failed("Profile response was not a JSON object."))

        try:
            profile = UserProfile.model_validate(profile_payload)
        except ValidationError as exc:
            return Err(profile_fetch_failed(_describe_validation_error(exc)))
        return Ok(profile)


__all__ = [
    "GoogleOAuthClient",
    "OAuthStateCodec",
]
