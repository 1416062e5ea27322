"""Expose constructed client wrappers."""

from .google_auth import GoogleOAuthClient, OAuthStateCodec
from .webhook import ZapierWebhookClient

__all__ = [
    "GoogleOAuthClient",
    "OAuthStateCodec",
    "ZapierWebhookClient",
]
