"""Unit tests for OAuthService driving an OAuth 2.0 provider.

Covers:
- get_request_token is unsupported regardless of configuration
- authorization-code exchange (body vs query parameters, Basic credentials)
- access token placement when signing (query, body, header)
- refresh_access_token (rotating and non-rotating providers)
- provider rejection and malformed responses

Uses table-driven @dataclass cases wherever possible.
"""

import base64
import json
from dataclasses import dataclass
from typing import Optional

import pytest

from oauthkit.adapters.transport.fake import FakeTransport
from oauthkit.core.exceptions import (
    InvalidTokenStateError,
    ProtocolError,
    ProviderRejectedError,
    UnsupportedOperationError,
)
from oauthkit.domains.oauth.apis import FACEBOOK, AccessTokenPlacement, OAuth20Api
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.service import OAuthService
from oauthkit.domains.oauth.types import (
    OAuthConfig,
    Response,
    SignatureType,
    Token,
    TokenKind,
    TokenState,
    Verb,
    Verifier,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

CALLBACK = "https://app.example.com/callback"


def _api(**overrides) -> OAuth20Api:
    fields = dict(
        name="example",
        authorization_url="https://auth.example.com/authorize",
        access_token_endpoint="https://auth.example.com/token",
    )
    fields.update(overrides)
    return OAuth20Api(**fields)


def _config(**overrides) -> OAuthConfig:
    fields = dict(api_key="client-id", api_secret="client-secret", callback_url=CALLBACK)
    fields.update(overrides)
    return OAuthConfig(**fields)


def _service(transport=None, api=None, **config_overrides) -> OAuthService:
    return OAuthService(
        _config(**config_overrides),
        api or _api(),
        transport if transport is not None else FakeTransport(),
    )


def _json_response(status_code: int = 200, **fields) -> Response:
    return Response(status_code, json.dumps(fields), {"Content-Type": "application/json"})


# ===========================================================================
# get_request_token
# ===========================================================================


@pytest.mark.parametrize(
    "config_overrides",
    [
        {},
        {"callback_url": None},
        {"scope": "email"},
        {"signature_type": SignatureType.QUERY_STRING},
    ],
    ids=["default", "no callback", "scope", "query string"],
)
def test_request_token_is_unsupported(config_overrides):
    transport = FakeTransport()
    service = _service(transport, **config_overrides)

    with pytest.raises(UnsupportedOperationError) as exc_info:
        service.get_request_token()

    assert "get_authorization_url" in str(exc_info.value)
    assert exc_info.value.version == "2.0"
    assert transport.requests == []
    assert service.state == TokenState.UNAUTHENTICATED


def test_authorization_url_needs_no_token():
    url = _service(scope="email").get_authorization_url()
    assert url == (
        "https://auth.example.com/authorize?response_type=code&client_id=client-id"
        "&redirect_uri=https%3A%2F%2Fapp.example.com%2Fcallback&scope=email"
    )


# ===========================================================================
# get_access_token
# ===========================================================================


def test_access_token_exchange_posts_form_body():
    transport = FakeTransport(
        _json_response(access_token="at", refresh_token="rt", expires_in=3600)
    )
    service = _service(transport)

    token = service.get_access_token(None, Verifier("code123"))

    assert token == Token("at", kind=TokenKind.ACCESS, refresh_token="rt", expires_in=3600)
    assert service.state == TokenState.ACCESS_TOKEN_OBTAINED

    sent = transport.last_request
    assert sent.verb == Verb.POST
    assert sent.endpoint == "https://auth.example.com/token"
    assert sent.body_params.items() == [
        ("grant_type", "authorization_code"),
        ("code", "code123"),
        ("redirect_uri", CALLBACK),
        ("client_id", "client-id"),
        ("client_secret", "client-secret"),
    ]
    assert len(sent.query_params) == 0
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert "Authorization" not in sent.headers


def test_access_token_exchange_with_get_uses_query():
    transport = FakeTransport(Response(200, "access_token=abc%7C123&expires=5108"))
    service = _service(transport, api=FACEBOOK)

    token = service.get_access_token(None, Verifier("code123"))

    assert token.value == "abc|123"
    assert token.expires_in == 5108
    sent = transport.last_request
    assert sent.verb == Verb.GET
    assert sent.query_params.items() == [
        ("code", "code123"),
        ("redirect_uri", CALLBACK),
        ("client_id", "client-id"),
        ("client_secret", "client-secret"),
    ]
    assert sent.body_contents() is None


def test_access_token_exchange_with_basic_credentials():
    transport = FakeTransport(_json_response(access_token="at"))
    service = _service(transport, api=_api(client_credential_location="header"), scope="")

    service.get_access_token(None, Verifier("code123"))

    sent = transport.last_request
    expected = base64.b64encode(b"client-id:client-secret").decode("ascii")
    assert sent.headers["Authorization"] == f"Basic {expected}"
    assert "client_id" not in sent.body_params
    assert "client_secret" not in sent.body_params
    assert sent.body_params.get("scope") == ""


def test_access_token_exchange_sends_adapter_headers():
    transport = FakeTransport(_json_response(access_token="at"))
    api = _api(access_token_headers={"Accept": "application/json"})

    _service(transport, api=api).get_access_token(None, Verifier("code123"))

    assert transport.last_request.headers["Accept"] == "application/json"


def test_access_token_exchange_ignores_request_token():
    transport = FakeTransport(_json_response(access_token="at"), _json_response(access_token="b"))
    service = _service(transport)
    stale = Token("whatever", kind=TokenKind.ACCESS)

    service.get_access_token(stale, Verifier("code1"))
    service.get_access_token(stale, Verifier("code2"))

    assert len(transport.requests) == 2


# ===========================================================================
# sign_request (table-driven)
# ===========================================================================


@dataclass
class PlacementCase:
    desc: str
    placement: AccessTokenPlacement
    verb: Verb
    param_name: str = "access_token"
    expected_query: Optional[str] = None
    expected_body: Optional[str] = None
    expected_header: Optional[str] = None


PLACEMENT_CASES = [
    PlacementCase("query", AccessTokenPlacement.QUERY, Verb.GET, expected_query="at-123"),
    PlacementCase(
        "custom query name",
        AccessTokenPlacement.QUERY,
        Verb.GET,
        param_name="oauth2_access_token",
        expected_query="at-123",
    ),
    PlacementCase("body", AccessTokenPlacement.BODY, Verb.POST, expected_body="at-123"),
    PlacementCase(
        "bearer header", AccessTokenPlacement.HEADER, Verb.GET, expected_header="Bearer at-123"
    ),
]


@pytest.mark.parametrize("case", PLACEMENT_CASES, ids=lambda c: c.desc)
def test_sign_request_placement(case: PlacementCase):
    api = _api(token_placement=case.placement, access_token_param=case.param_name)
    request = OAuthRequest(case.verb, "https://api.example.com/me")

    _service(api=api).sign_request(Token("at-123"), request)

    assert request.query_params.get(case.param_name) == case.expected_query
    assert request.body_params.get(case.param_name) == case.expected_body
    assert request.headers.get("Authorization") == case.expected_header
    assert len(request.oauth_params) == 0


def test_sign_request_requires_token():
    with pytest.raises(InvalidTokenStateError):
        _service().sign_request(Token.empty(), OAuthRequest(Verb.GET, "https://api.example.com/"))


# ===========================================================================
# refresh_access_token
# ===========================================================================


def test_refresh_keeps_refresh_token_when_not_rotated():
    transport = FakeTransport(_json_response(access_token="at2", expires_in=60))
    service = _service(transport)

    refreshed = service.refresh_access_token(Token("at1", refresh_token="rt"))

    assert refreshed.value == "at2"
    assert refreshed.refresh_token == "rt"
    assert refreshed.expires_in == 60
    assert refreshed.kind == TokenKind.ACCESS
    assert service.state == TokenState.ACCESS_TOKEN_OBTAINED

    sent = transport.last_request
    assert sent.endpoint == "https://auth.example.com/token"
    assert sent.body_params.items() == [
        ("grant_type", "refresh_token"),
        ("refresh_token", "rt"),
        ("client_id", "client-id"),
        ("client_secret", "client-secret"),
    ]


def test_refresh_rotates_refresh_token():
    transport = FakeTransport(_json_response(access_token="at2", refresh_token="rt2"))
    api = _api(refresh_token_endpoint="https://auth.example.com/refresh")

    refreshed = _service(transport, api=api).refresh_access_token(
        Token("at1", refresh_token="rt")
    )

    assert refreshed.refresh_token == "rt2"
    assert transport.last_request.endpoint == "https://auth.example.com/refresh"


def test_refresh_requires_refresh_token():
    transport = FakeTransport()
    with pytest.raises(InvalidTokenStateError):
        _service(transport).refresh_access_token(Token("at1"))
    assert transport.requests == []


# ===========================================================================
# Failure modes
# ===========================================================================


@pytest.mark.parametrize(
    "response",
    [
        _json_response(301, access_token="moved"),
        _json_response(302, access_token="login-page", token_type="bearer"),
        _json_response(400, error="invalid_grant"),
    ],
    ids=lambda r: str(r.status_code),
)
def test_provider_rejection(response: Response):
    transport = FakeTransport(response)
    service = _service(transport)

    with pytest.raises(ProviderRejectedError) as exc_info:
        service.get_access_token(None, Verifier("expired"))

    assert exc_info.value.status_code == response.status_code
    assert exc_info.value.raw_response == response.body
    assert service.state == TokenState.UNAUTHENTICATED


def test_malformed_access_token_response():
    transport = FakeTransport(Response(200, "<html>oops</html>"))
    with pytest.raises(ProtocolError):
        _service(transport).get_access_token(None, Verifier("code"))
