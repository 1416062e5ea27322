"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_customer_key_strategy,
    get_google_oauth_client,
    get_oauth_callback_flow,
    get_oauth_state_codec,
    get_webhook_client,
)
from .config import SettingsDependency, get_app_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_customer_key_strategy",
    "get_google_oauth_client",
    "get_oauth_callback_flow",
    "get_oauth_state_codec",
    "get_webhook_client",
]
