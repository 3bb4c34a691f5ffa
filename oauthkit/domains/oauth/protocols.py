"""Protocols for OAuth domain collaborators.

Uses :class:`typing.Protocol` so implementations don't need to inherit.
"""

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.types import (
    OAuthConfig,
    ProtocolVersion,
    Response,
    Token,
    Verifier,
)

if TYPE_CHECKING:
    from oauthkit.core.logging import ContextualLogger
    from oauthkit.domains.oauth.apis import ApiAdapter
    from oauthkit.domains.oauth.signing import TimestampService


@runtime_checkable
class Transport(Protocol):
    """Blocking request sender supplied by the caller."""

    def send(self, request: OAuthRequest) -> Response:
        """Send the request and return the provider response."""
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Non-blocking request sender supplied by the caller."""

    async def send(self, request: OAuthRequest) -> Response:
        """Send the request and return the provider response."""
        ...


@runtime_checkable
class TokenStore(Protocol):
    """Persistence of a single token. Opaque to the signing core."""

    def save(self, token: Token) -> None:
        """Persist ``token``, replacing any previous one."""
        ...

    def load(self) -> Optional[Token]:
        """Return the stored token, or None when nothing was saved."""
        ...


class TokenExtractor(Protocol):
    """Parses a provider response body into a Token."""

    def extract(self, body: str) -> Token:
        """Extract a token or raise ProtocolError."""
        ...


class Signer(Protocol):
    """OAuth 1.0a signature method."""

    method: str

    def sign(self, base_string: str, consumer_secret: str, token_secret: str = "") -> str:
        """Sign the base string with the consumer and token secrets."""
        ...


class ProtocolStrategy(Protocol):
    """Protocol-specific steps injected into an OAuthService."""

    version: ProtocolVersion
    supports_request_token: bool

    def build_request_token_request(
        self,
        config: OAuthConfig,
        api: "ApiAdapter",
        timestamps: "TimestampService",
        logger: "ContextualLogger",
    ) -> OAuthRequest:
        """Build the signed temporary-credentials request."""
        ...

    def authorization_url(
        self, config: OAuthConfig, api: "ApiAdapter", request_token: Optional[Token]
    ) -> str:
        """Build the URL the end user must visit."""
        ...

    def build_access_token_request(
        self,
        config: OAuthConfig,
        api: "ApiAdapter",
        request_token: Optional[Token],
        verifier: Verifier,
        timestamps: "TimestampService",
        logger: "ContextualLogger",
    ) -> OAuthRequest:
        """Build the request exchanging the verifier for an access token."""
        ...

    def build_refresh_request(
        self, config: OAuthConfig, api: "ApiAdapter", token: Token
    ) -> OAuthRequest:
        """Build the request exchanging a refresh token for a new access token."""
        ...

    def sign(
        self,
        config: OAuthConfig,
        api: "ApiAdapter",
        token: Optional[Token],
        request: OAuthRequest,
        timestamps: "TimestampService",
        logger: "ContextualLogger",
    ) -> None:
        """Attach credentials to ``request`` in place."""
        ...
