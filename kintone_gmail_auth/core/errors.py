"""
Error taxonomy for the OAuth callback flow.

Failures travel between stages as ``CallbackFailure`` values rather than
exceptions. ``message`` is safe to show to the browser; ``detail`` carries
upstream information for server-side logs only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus


class CallbackErrorKind(str, Enum):
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    PROVIDER_DENIED = "ProviderDenied"
    MISSING_PARAMETERS = "MissingParameters"
    INVALID_STATE = "InvalidState"
    TOKEN_EXCHANGE_FAILED = "TokenExchangeFailed"
    PROFILE_FETCH_FAILED = "ProfileFetchFailed"
    WEBHOOK_DELIVERY_FAILED = "WebhookDeliveryFailed"
    UNKNOWN_INTERNAL = "UnknownInternal"


_STATUS_BY_KIND = {
    CallbackErrorKind.METHOD_NOT_ALLOWED: HTTPStatus.METHOD_NOT_ALLOWED,
    CallbackErrorKind.UNKNOWN_INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class CallbackFailure:
    """A failed stage of the callback flow."""

    kind: CallbackErrorKind
    message: str
    detail: str | None = None

    @property
    def status_code(self) -> int:
        return int(_STATUS_BY_KIND.get(self.kind, HTTPStatus.BAD_REQUEST))

    def to_body(self) -> dict:
        """JSON body used when no redirect target is available."""
        body: dict = {"error": self.message}
        if self.kind in (CallbackErrorKind.PROVIDER_DENIED, CallbackErrorKind.INVALID_STATE):
            body["details"] = self.detail
        return body


def method_not_allowed(method: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.METHOD_NOT_ALLOWED, "Method not allowed", detail=method
    )


def provider_denied(error: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.PROVIDER_DENIED, "OAuth authentication failed", detail=error
    )


def missing_parameters() -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.MISSING_PARAMETERS, "Missing required parameters"
    )


def invalid_state(reason: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.INVALID_STATE, "Invalid state parameter", detail=reason
    )


def token_exchange_failed(detail: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.TOKEN_EXCHANGE_FAILED,
        "Failed to obtain access token",
        detail=detail,
    )


def profile_fetch_failed(detail: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.PROFILE_FETCH_FAILED,
        "Failed to fetch user profile",
        detail=detail,
    )


def webhook_delivery_failed(detail: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.WEBHOOK_DELIVERY_FAILED,
        "Failed to deliver webhook payload",
        detail=detail,
    )


def unknown_internal(detail: str) -> CallbackFailure:
    return CallbackFailure(
        CallbackErrorKind.UNKNOWN_INTERNAL, "Internal server error", detail=detail
    )


__all__ = [
    "CallbackErrorKind",
    "CallbackFailure",
    "invalid_state",
    "method_not_allowed",
    "missing_parameters",
    "profile_fetch_failed",
    "provider_denied",
    "token_exchange_failed",
    "unknown_internal",
    "webhook_delivery_failed",
]
