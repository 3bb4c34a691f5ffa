"""Fake transports for testing.

Return seeded responses in order and record every request sent.
"""

from __future__ import annotations

from typing import List, Optional

from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.types import Response


class FakeTransport:
    """Test implementation of Transport.

    Usage::

        fake = FakeTransport()
        fake.seed(Response(200, "oauth_token=t&oauth_token_secret=s"))
        service = OAuthService(config, TWITTER, fake)
        service.get_request_token()
        assert fake.requests[0].verb == Verb.POST
    """

    def __init__(self, *responses: Response) -> None:
        self._responses: List[Response] = list(responses)
        self._error: Optional[Exception] = None
        self.requests: List[OAuthRequest] = []

    def seed(self, response: Response) -> None:
        """Queue a response for the next send."""
        self._responses.append(response)

    def set_error(self, error: Exception) -> None:
        """Make every send raise ``error``."""
        self._error = error

    def clear_error(self) -> None:
        self._error = None

    @property
    def last_request(self) -> Optional[OAuthRequest]:
        return self.requests[-1] if self.requests else None

    def _next(self, request: OAuthRequest) -> Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        if not self._responses:
            raise AssertionError(f"No seeded response for {request!r}")
        return self._responses.pop(0)

    def send(self, request: OAuthRequest) -> Response:
        return self._next(request)


class FakeAsyncTransport(FakeTransport):
    """Test implementation of AsyncTransport."""

    async def send(self, request: OAuthRequest) -> Response:  # type: ignore[override]
        return self._next(request)
