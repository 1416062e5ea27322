"""Build the browser redirects that hand the OAuth outcome back to Kintone."""

from __future__ import annotations

import logging
from urllib.parse import quote

logger = logging.getLogger(__name__)


def _encode(value: object) -> str:
    return quote(str(value), safe="")


def build_success_redirect(
    return_domain: str,
    app_path: str,
    app_id: int | str,
    customer_key: str,
    email: str,
) -> str:
    """``{return_domain}/{app_path}/{app_id}/?auth_success=1&customer_key=..&email=..``"""
    base = return_domain.rstrip("/")
    path = "/".join(segment for segment in (app_path, _encode(app_id)) if segment)
    return (
        f"{base}/{path}/"
        f"?auth_success=1&customer_key={_encode(customer_key)}&email={_encode(email)}"
    )


def build_error_redirect(target: str, message: str | None) -> str:
    """Append ``auth_error=1`` and the encoded message to ``target``.

    Never raises: a message that cannot be percent-encoded is dropped and the
    redirect is still produced.
    """
    separator = "&" if "?" in target else "?"
    query = "auth_error=1"
    if message:
        try:
            query += f"&error_message={_encode(message)}"
        except (UnicodeEncodeError, TypeError):
            logger.warning("Dropping error message that could not be URL-encoded")
    return f"{target}{separator}{query}"


__all__ = ["build_error_redirect", "build_success_redirect"]
