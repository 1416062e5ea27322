try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import base64
import json

import pytest

from kintone_gmail_auth.clients.google_auth import OAuthStateCodec
from kintone_gmail_auth.core.errors import CallbackErrorKind
from kintone_gmail_auth.core.result import Err, Ok


def _b64(payload) -> str:
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


@pytest.mark.parametrize(
    "return_domain, app_id, state",
    [
        ("https://acme.cybozu.com", 42, "xyz"),
        ("https://demo.kintone.com/", "17", {"nonce": "n-1", "step": [1, 2]}),
        ("http://localhost:8080", 3, None),
    ],
)
def test_decode_recovers_encoded_context(return_domain, app_id, state) -> None:
    codec = OAuthStateCodec()

    result = codec.decode(codec.encode(return_domain, app_id, state))

    assert isinstance(result, Ok)
    context = result.value
    assert context.return_domain == return_domain
    assert context.app_id == app_id
    assert type(context.app_id) is type(app_id)
    assert context.caller_state == state


def test_decode_keeps_raw_payload_including_unknown_keys() -> None:
    token = _b64(
        {"return_domain": "https://acme.cybozu.com", "app_id": 1, "state": "s", "extra": True}
    )

    result = OAuthStateCodec().decode(token)

    assert isinstance(result, Ok)
    assert result.value.raw["extra"] is True


def test_decode_accepts_urlsafe_tokens_without_padding() -> None:
    payload = {"return_domain": "https://acme.cybozu.com", "app_id": 7, "state": "???>>>"}
    raw = json.dumps(payload).encode("utf-8")
    token = base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    result = OAuthStateCodec().decode(token)

    assert isinstance(result, Ok)
    assert result.value.caller_state == "???>>>"


def test_decode_handles_non_ascii_state() -> None:
    codec = OAuthStateCodec()

    result = codec.decode(codec.encode("https://acme.cybozu.com", 5, "日本語"))

    assert isinstance(result, Ok)
    assert result.value.caller_state == "日本語"


@pytest.mark.parametrize(
    "token, reason",
    [
        ("not base64!!", "base64"),
        ("a", "base64"),
        ("ñandú", "base64"),
        (base64.b64encode(b"{not json").decode(), "JSON"),
        (base64.b64encode(b"\xff\xfe\x00").decode(), "JSON"),
        (_b64(["https://acme.cybozu.com", 42]), "object"),
        (_b64("just a string"), "object"),
    ],
)
def test_decode_rejects_malformed_tokens(token: str, reason: str) -> None:
    result = OAuthStateCodec().decode(token)

    assert isinstance(result, Err)
    assert result.error.kind is CallbackErrorKind.INVALID_STATE
    assert result.error.message == "Invalid state parameter"
    assert reason in result.error.detail


@pytest.mark.parametrize(
    "payload",
    [
        {"app_id": 42, "state": "xyz"},
        {"return_domain": "", "app_id": 42},
        {"return_domain": "javascript:alert(1)", "app_id": 42},
        {"return_domain": "acme.cybozu.com", "app_id": 42},
        {"return_domain": "https://acme.cybozu.com", "state": "xyz"},
        {"return_domain": "https://acme.cybozu.com", "app_id": "  "},
    ],
)
def test_decode_rejects_unusable_context(payload: dict) -> None:
    result = OAuthStateCodec().decode(_b64(payload))

    assert isinstance(result, Err)
    assert result.error.kind is CallbackErrorKind.INVALID_STATE
