"""Public schema exports."""

from .auth import (
    CallbackContext,
    CallbackQuery,
    TokenSet,
    UserProfile,
    WebhookPayload,
)

__all__ = [
    "CallbackContext",
    "CallbackQuery",
    "TokenSet",
    "UserProfile",
    "WebhookPayload",
]
