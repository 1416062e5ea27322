"""
FastAPI routes for the Kintone Gmail auth bridge.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from kintone_gmail_auth.dependencies import get_oauth_callback_flow
from kintone_gmail_auth.services import CallbackOutcome, OAuthCallbackFlow

router = APIRouter()
logger = logging.getLogger(__name__)

# Every verb is routed here so non-GET requests get the callback's own 405 body.
_CALLBACK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.api_route("/oauth/callback", methods=_CALLBACK_METHODS)
async def handle_google_oauth_callback(
    request: Request,
    flow: Annotated[OAuthCallbackFlow, Depends(get_oauth_callback_flow)],
    code: str | None = Query(
        default=None, description="Authorization code returned by Google."
    ),
    state: str | None = Query(
        default=None, description="Base64 JSON state token built by Kintone."
    ),
    error: str | None = Query(
        default=None, description="Error reported by Google when consent fails."
    ),
) -> Response:
    """Complete the Google OAuth callback and hand the result back to Kintone."""
    outcome = await flow.handle(
        method=request.method, code=code, state=state, error=error
    )
    return _render(outcome)


def _render(outcome: CallbackOutcome) -> Response:
    if outcome.redirect_url is not None:
        return RedirectResponse(url=outcome.redirect_url, status_code=outcome.status_code)
    return JSONResponse(content=outcome.body or {}, status_code=outcome.status_code)


__all__ = ["router"]
