"""httpx-based transports.

Send an :class:`OAuthRequest` as-is and wrap the reply in a
:class:`Response`. No retries: transport errors (``httpx.HTTPError``)
propagate to the caller unchanged.
"""

from __future__ import annotations

from typing import Dict, Optional

import httpx

from oauthkit.core.config import settings
from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.types import Response


def _request_kwargs(request: OAuthRequest) -> Dict[str, object]:
    headers = dict(request.headers)
    content = request.body_contents()
    if (
        content is not None
        and request.payload is None
        and constants.CONTENT_TYPE_HEADER not in headers
    ):
        headers[constants.CONTENT_TYPE_HEADER] = constants.FORM_CONTENT_TYPE
    return {
        "method": request.verb.value,
        "url": request.complete_url,
        "headers": headers,
        "content": content,
    }


def _to_response(response: httpx.Response) -> Response:
    return Response(
        status_code=response.status_code,
        body=response.text,
        headers=dict(response.headers),
    )


class HttpxTransport:
    """Blocking transport backed by ``httpx.Client``."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client or httpx.Client(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        )

    def send(self, request: OAuthRequest) -> Response:
        response = self._client.request(**_request_kwargs(request))
        return _to_response(response)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class AsyncHttpxTransport:
    """Non-blocking transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        )

    async def send(self, request: OAuthRequest) -> Response:
        response = await self._client.request(**_request_kwargs(request))
        return _to_response(response)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpxTransport":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
