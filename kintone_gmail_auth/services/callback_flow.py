"""
Orchestration of the Google OAuth callback.

Stages run strictly in order and each one yields an ``Ok`` or ``Err``:

1. request validation (method, provider error, required parameters)
2. state decoding
3. code exchange, then profile fetch
4. customer key, webhook relay, success redirect

Failures before the state is decoded are answered with a JSON body. Later
failures redirect back to the Kintone domain carried in the state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Optional

from kintone_gmail_auth.clients.google_auth import GoogleOAuthClient, OAuthStateCodec
from kintone_gmail_auth.clients.webhook import ZapierWebhookClient
from kintone_gmail_auth.core.config import OAuthSettings
from kintone_gmail_auth.core.errors import (
    CallbackFailure,
    method_not_allowed,
    missing_parameters,
    profile_fetch_failed,
    provider_denied,
    unknown_internal,
)
from kintone_gmail_auth.core.result import Err, Ok, Result
from kintone_gmail_auth.schemas.auth import CallbackContext, CallbackQuery, WebhookPayload
from kintone_gmail_auth.services.customer_keys import CustomerKeyStrategy
from kintone_gmail_auth.services.redirects import (
    build_error_redirect,
    build_success_redirect,
)

logger = logging.getLogger(__name__)

CALLBACK_METHOD = "GET"
REDIRECT_STATUS = int(HTTPStatus.TEMPORARY_REDIRECT)


@dataclass(frozen=True)
class CallbackOutcome:
    """What the HTTP layer should send back: a redirect or a JSON body."""

    status_code: int
    redirect_url: Optional[str] = None
    body: Optional[dict[str, Any]] = None
    failure: Optional[CallbackFailure] = None


def validate_request(
    method: str,
    code: Optional[str],
    state: Optional[str],
    error: Optional[str],
) -> Result[CallbackQuery, CallbackFailure]:
    """Check the inbound request; the first failing check wins."""
    if method.upper() != CALLBACK_METHOD:
        return Err(method_not_allowed(method))
    if error:
        return Err(provider_denied(error))
    if not code or not state:
        return Err(missing_parameters())
    return Ok(CallbackQuery(code=code, state=state))


class OAuthCallbackFlow:
    """Run one callback invocation from query parameters to outcome."""

    def __init__(
        self,
        *,
        settings: OAuthSettings,
        state_codec: OAuthStateCodec,
        oauth_client: GoogleOAuthClient,
        webhook_client: ZapierWebhookClient,
        customer_keys: CustomerKeyStrategy,
    ) -> None:
        self._settings = settings
        self._state_codec = state_codec
        self._oauth = oauth_client
        self._webhook = webhook_client
        self._customer_keys = customer_keys

    async def handle(
        self,
        *,
        method: str,
        code: Optional[str] = None,
        state: Optional[str] = None,
        error: Optional[str] = None,
    ) -> CallbackOutcome:
        logger.info(
            "OAuth callback received (method=%s, code=%s, state=%s, error=%s)",
            method,
            bool(code),
            bool(state),
            error,
        )
        context: Optional[CallbackContext] = None
        try:
            validated = validate_request(method, code, state, error)
            if isinstance(validated, Err):
                return self._reject(validated.error)
            query = validated.value

            decoded = self._state_codec.decode(query.state)
            if isinstance(decoded, Err):
                return self._reject(decoded.error)
            context = decoded.value
            logger.info(
                "Decoded state (return_domain=%s, app_id=%s)",
                context.return_domain,
                context.app_id,
            )

            if query.code == self._settings.test_code:
                return self._diagnostic(context)

            return await self._complete(query.code, context)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unexpected error during OAuth callback")
            return self._redirect_failure(unknown_internal(repr(exc)), context)

    async def _complete(self, code: str, context: CallbackContext) -> CallbackOutcome:
        exchanged = await self._oauth.exchange_authorization_code(code)
        if isinstance(exchanged, Err):
            return self._redirect_failure(exchanged.error, context)
        tokens = exchanged.value

        fetched = await self._oauth.fetch_user_profile(tokens.access_token)
        if isinstance(fetched, Err):
            return self._redirect_failure(fetched.error, context)
        profile = fetched.value
        if not profile.email:
            return self._redirect_failure(
                profile_fetch_failed("Profile response did not include an email."),
                context,
            )
        logger.info("Fetched user profile (email=%s)", profile.email)

        customer_key = self._customer_keys.derive(context)
        logger.info("Generated customer key %s", customer_key)

        payload = WebhookPayload.build(
            customer_key=customer_key,
            context=context,
            tokens=tokens,
            profile=profile,
        )
        await self._relay(payload)

        redirect_url = build_success_redirect(
            context.return_domain,
            self._settings.app_path,
            context.app_id,
            customer_key,
            profile.email,
        )
        logger.info("Redirecting to %s", redirect_url)
        return CallbackOutcome(status_code=REDIRECT_STATUS, redirect_url=redirect_url)

    async def _relay(self, payload: WebhookPayload) -> None:
        """Deliver the payload when a webhook is configured; never raises."""
        if not self._webhook.enabled:
            logger.info("Webhook not configured or placeholder URL; skipping relay")
            return
        try:
            delivered = await self._webhook.deliver(payload)
        except Exception:  # pylint: disable=broad-except
            logger.exception("Unexpected error while relaying webhook payload")
            return
        if isinstance(delivered, Err):
            logger.warning(
                "%s: %s", delivered.error.kind.value, delivered.error.detail
            )
            return
        logger.info("Webhook payload delivered for %s", payload.customer_key)

    def _diagnostic(self, context: CallbackContext) -> CallbackOutcome:
        logger.info("Test code received; skipping token exchange")
        return CallbackOutcome(
            status_code=int(HTTPStatus.OK),
            body={
                "message": "OAuth callback test successful",
                "decodedState": context.raw,
                "customerKey": self._settings.test_customer_key,
            },
        )

    def _reject(self, failure: CallbackFailure) -> CallbackOutcome:
        logger.warning(
            "Rejected OAuth callback: %s (%s)", failure.kind.value, failure.detail
        )
        return CallbackOutcome(
            status_code=failure.status_code, body=failure.to_body(), failure=failure
        )

    def _redirect_failure(
        self, failure: CallbackFailure, context: Optional[CallbackContext]
    ) -> CallbackOutcome:
        logger.error("OAuth callback failed: %s (%s)", failure.kind.value, failure.detail)
        target = context.return_domain if context else self._settings.error_fallback_url
        if not target:
            return CallbackOutcome(
                status_code=failure.status_code, body=failure.to_body(), failure=failure
            )
        return CallbackOutcome(
            status_code=REDIRECT_STATUS,
            redirect_url=build_error_redirect(target, failure.message),
            failure=failure,
        )


__all__ = [
    "CALLBACK_METHOD",
    "CallbackOutcome",
    "OAuthCallbackFlow",
    "validate_request",
]
