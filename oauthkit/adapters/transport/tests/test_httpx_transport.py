"""Unit tests for the httpx transports using httpx.MockTransport."""

import json
from typing import List

import httpx
import pytest

from oauthkit.adapters.transport.httpx_transport import AsyncHttpxTransport, HttpxTransport
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.types import Verb

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _recording_handler(captured: List[httpx.Request], response: httpx.Response):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return response

    return handler


def _form_request() -> OAuthRequest:
    request = OAuthRequest(Verb.POST, "https://api.example.com/oauth/token?page=2")
    request.add_query_parameter("q", "a b")
    request.add_body_parameter("grant_type", "authorization_code")
    request.add_body_parameter("code", "x y")
    request.add_header("Authorization", 'OAuth oauth_nonce="n"')
    return request


# ===========================================================================
# HttpxTransport
# ===========================================================================


def test_send_form_request():
    captured: List[httpx.Request] = []
    reply = httpx.Response(
        200, text="oauth_token=t&oauth_token_secret=s", headers={"X-RateLimit-Remaining": "9"}
    )
    client = httpx.Client(transport=httpx.MockTransport(_recording_handler(captured, reply)))

    response = HttpxTransport(client=client).send(_form_request())

    sent = captured[0]
    assert sent.method == "POST"
    assert sent.url.host == "api.example.com"
    assert sent.url.path == "/oauth/token"
    assert dict(sent.url.params) == {"page": "2", "q": "a b"}
    assert sent.headers["Authorization"] == 'OAuth oauth_nonce="n"'
    assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert sent.content == b"grant_type=authorization_code&code=x%20y"

    assert response.status_code == 200
    assert response.body == "oauth_token=t&oauth_token_secret=s"
    assert response.header("x-ratelimit-remaining") == "9"
    assert response.is_successful


def test_send_raw_payload_keeps_content_type():
    captured: List[httpx.Request] = []
    client = httpx.Client(
        transport=httpx.MockTransport(_recording_handler(captured, httpx.Response(201)))
    )
    request = OAuthRequest(Verb.PUT, "https://api.example.com/items/1")
    request.add_header("Content-Type", "application/json")
    request.set_payload('{"name": "beach"}')

    HttpxTransport(client=client).send(request)

    assert captured[0].headers["Content-Type"] == "application/json"
    assert captured[0].content == b'{"name": "beach"}'


def test_send_without_body():
    captured: List[httpx.Request] = []
    client = httpx.Client(
        transport=httpx.MockTransport(_recording_handler(captured, httpx.Response(404)))
    )

    response = HttpxTransport(client=client).send(
        OAuthRequest(Verb.GET, "https://api.example.com/me")
    )

    assert captured[0].content == b""
    assert "Content-Type" not in captured[0].headers
    assert response.status_code == 404
    assert not response.is_successful


def test_transport_errors_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(httpx.ConnectError):
        HttpxTransport(client=client).send(OAuthRequest(Verb.GET, "https://api.example.com/"))


def test_context_manager_closes_client():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with HttpxTransport(client=client):
        pass
    assert client.is_closed


# ===========================================================================
# AsyncHttpxTransport
# ===========================================================================


@pytest.mark.asyncio
async def test_async_send_form_request():
    captured: List[httpx.Request] = []
    reply = httpx.Response(200, json={"access_token": "at"})
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(_recording_handler(captured, reply))
    )

    async with AsyncHttpxTransport(client=client) as transport:
        response = await transport.send(_form_request())

    assert captured[0].method == "POST"
    assert captured[0].content == b"grant_type=authorization_code&code=x%20y"
    assert json.loads(response.body) == {"access_token": "at"}
    assert client.is_closed
