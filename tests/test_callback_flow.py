try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from kintone_gmail_auth.clients import OAuthStateCodec
from kintone_gmail_auth.core.config import OAuthSettings
from kintone_gmail_auth.core.errors import CallbackErrorKind
from kintone_gmail_auth.core.result import Err, Ok
from kintone_gmail_auth.schemas import TokenSet, UserProfile
from kintone_gmail_auth.services import OAuthCallbackFlow, validate_request


@pytest.mark.parametrize(
    "method, code, state, error, expected",
    [
        ("POST", None, None, "access_denied", CallbackErrorKind.METHOD_NOT_ALLOWED),
        ("GET", "code", "state", "access_denied", CallbackErrorKind.PROVIDER_DENIED),
        ("GET", None, None, "access_denied", CallbackErrorKind.PROVIDER_DENIED),
        ("GET", None, "state", None, CallbackErrorKind.MISSING_PARAMETERS),
        ("GET", "code", None, None, CallbackErrorKind.MISSING_PARAMETERS),
        ("GET", "code", "", None, CallbackErrorKind.MISSING_PARAMETERS),
    ],
)
def test_validate_request_first_failure_wins(method, code, state, error, expected) -> None:
    result = validate_request(method, code, state, error)

    assert isinstance(result, Err)
    assert result.error.kind is expected


def test_validate_request_accepts_complete_get() -> None:
    result = validate_request("get", "code", "state", None)

    assert isinstance(result, Ok)
    assert result.value.code == "code"
    assert result.value.state == "state"


class BrokenCodec:
    def decode(self, token):
        raise RuntimeError("codec bug")


class StubOAuthClient:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def exchange_authorization_code(self, code):
        self.calls.append("exchange")
        return Ok(TokenSet(access_token="ya29.access", expires_in=60))

    async def fetch_user_profile(self, access_token):
        self.calls.append("profile")
        return Ok(UserProfile(email=None, name="No Email"))


class StubWebhook:
    enabled = False


class FixedKeys:
    def derive(self, context) -> str:
        return "customer_fixed"


def _flow(settings: OAuthSettings, *, codec=None, oauth=None) -> OAuthCallbackFlow:
    return OAuthCallbackFlow(
        settings=settings,
        state_codec=codec or OAuthStateCodec(),
        oauth_client=oauth or StubOAuthClient(),
        webhook_client=StubWebhook(),
        customer_keys=FixedKeys(),
    )


@pytest.mark.anyio
async def test_unexpected_error_without_context_uses_fallback_url() -> None:
    flow = _flow(OAuthSettings(), codec=BrokenCodec())

    outcome = await flow.handle(method="GET", code="auth-code", state="token")

    assert outcome.status_code == 307
    assert outcome.redirect_url == (
        "about:blank?auth_error=1&error_message=Internal%20server%20error"
    )
    assert outcome.failure.kind is CallbackErrorKind.UNKNOWN_INTERNAL


@pytest.mark.anyio
async def test_unexpected_error_without_fallback_returns_500() -> None:
    flow = _flow(OAuthSettings(OAUTH_ERROR_FALLBACK_URL=""), codec=BrokenCodec())

    outcome = await flow.handle(method="GET", code="auth-code", state="token")

    assert outcome.status_code == 500
    assert outcome.redirect_url is None
    assert outcome.body == {"error": "Internal server error"}


@pytest.mark.anyio
async def test_profile_without_email_is_a_profile_failure() -> None:
    oauth = StubOAuthClient()
    flow = _flow(OAuthSettings(), oauth=oauth)
    state = OAuthStateCodec().encode("https://acme.cybozu.com", 42, "xyz")

    outcome = await flow.handle(method="GET", code="auth-code", state=state)

    assert outcome.failure.kind is CallbackErrorKind.PROFILE_FETCH_FAILED
    assert outcome.redirect_url.startswith("https://acme.cybozu.com?auth_error=1")
    assert oauth.calls == ["exchange", "profile"]


@pytest.mark.anyio
async def test_custom_test_code_and_app_path() -> None:
    settings = OAuthSettings(OAUTH_TEST_CODE="diagnostic", KINTONE_APP_PATH="/k/")
    oauth = StubOAuthClient()
    flow = _flow(settings, oauth=oauth)
    state = OAuthStateCodec().encode("https://acme.cybozu.com", 42, "xyz")

    outcome = await flow.handle(method="GET", code="diagnostic", state=state)

    assert outcome.status_code == 200
    assert outcome.body["customerKey"] == "test_customer_key_12345"
    assert oauth.calls == []
    assert settings.app_path == "k"
