"""
FastAPI application entrypoint for the Kintone Gmail auth bridge.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from kintone_gmail_auth.api.routes import router as api_router
from kintone_gmail_auth.core.config import AppSettings, get_settings
from kintone_gmail_auth.core.logging import configure_logging, mask_secret

logger = logging.getLogger(__name__)


def _log_configuration(settings: AppSettings) -> None:
    logger.info(
        "Configuration loaded (env=%s, client_id=%s, client_secret=%s, "
        "redirect_uri=%s, webhook=%s)",
        settings.environment,
        mask_secret(settings.google.client_id, visible=20),
        "SET" if settings.google.client_secret.get_secret_value() else "NOT_SET",
        settings.redirect_uri,
        "enabled" if settings.webhook.enabled else "disabled",
    )


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    _log_configuration(settings)

    app = FastAPI(
        title="Kintone Gmail Auth Bridge",
        version="0.1.0",
        description="Google OAuth callback that links Gmail accounts to Kintone apps.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
