"""Zapier webhook client used to sync credentials into the Kintone table."""

from __future__ import annotations

import logging

import httpx

from kintone_gmail_auth.core.config import WebhookSettings
from kintone_gmail_auth.core.errors import CallbackFailure, webhook_delivery_failed
from kintone_gmail_auth.core.result import Err, Ok, Result
from kintone_gmail_auth.schemas.auth import WebhookPayload

logger = logging.getLogger(__name__)


class ZapierWebhookClient:
    """POST webhook payloads to the configured Zapier catch hook."""

    def __init__(
        self,
        settings: WebhookSettings,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    async def deliver(self, payload: WebhookPayload) -> Result[None, CallbackFailure]:
        """Send ``payload``; the response body is ignored."""
        url = self._settings.url
        if not url:
            return Err(webhook_delivery_failed("No webhook URL configured."))

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=payload.to_wire())
        except httpx.HTTPError as exc:
            return Err(webhook_delivery_failed(f"Webhook request failed: {exc!r}"))

        if not response.is_success:
            return Err(
                webhook_delivery_failed(
                    f"Webhook returned {response.status_code}: {response.text[:200]}"
                )
            )
        return Ok(None)


__all__ = ["ZapierWebhookClient"]
