"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from kintone_gmail_auth.clients import (
    GoogleOAuthClient,
    OAuthStateCodec,
    ZapierWebhookClient,
)
from kintone_gmail_auth.core.config import AppSettings, get_settings
from kintone_gmail_auth.dependencies.config import get_app_settings
from kintone_gmail_auth.services import (
    CustomerKeyStrategy,
    OAuthCallbackFlow,
    build_customer_key_strategy,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_oauth_state_codec() -> OAuthStateCodec:
    """Provide the codec for Kintone state tokens."""
    return OAuthStateCodec()


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client bound to the startup redirect URI."""
    settings = _settings()
    return GoogleOAuthClient(
        settings.google,
        settings.redirect_uri,
        timeout=settings.oauth.http_timeout_seconds,
    )


@lru_cache()
def get_webhook_client() -> ZapierWebhookClient:
    """Provide the Zapier webhook client."""
    settings = _settings()
    return ZapierWebhookClient(
        settings.webhook, timeout=settings.oauth.http_timeout_seconds
    )


@lru_cache()
def get_customer_key_strategy() -> CustomerKeyStrategy:
    """Provide the configured customer key strategy."""
    settings = _settings()
    return build_customer_key_strategy(settings.oauth.customer_key_strategy)


def get_oauth_callback_flow(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    state_codec: Annotated[OAuthStateCodec, Depends(get_oauth_state_codec)],
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    webhook_client: Annotated[ZapierWebhookClient, Depends(get_webhook_client)],
    customer_keys: Annotated[CustomerKeyStrategy, Depends(get_customer_key_strategy)],
) -> OAuthCallbackFlow:
    """Build a request-scoped callback flow from the shared collaborators."""
    return OAuthCallbackFlow(
        settings=settings.oauth,
        state_codec=state_codec,
        oauth_client=oauth_client,
        webhook_client=webhook_client,
        customer_keys=customer_keys,
    )


__all__ = [
    "get_customer_key_strategy",
    "get_google_oauth_client",
    "get_oauth_callback_flow",
    "get_oauth_state_codec",
    "get_webhook_client",
]
