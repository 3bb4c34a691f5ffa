"""OAuth service: token-exchange state machine for both protocol variants.

The service is parameterized by a protocol strategy (selected from the
adapter's version tag) and a caller-supplied transport. State:

    UNAUTHENTICATED -> REQUEST_TOKEN_OBTAINED (1.0a only) -> ACCESS_TOKEN_OBTAINED

``OAuthConfig`` and the adapter are immutable, so one service can be used by
several callers at once as long as each call builds its own request.
"""

import threading
from collections import OrderedDict
from typing import Optional, Set, Tuple

from oauthkit.core.config import settings
from oauthkit.core.exceptions import (
    ConfigurationError,
    InvalidTokenStateError,
    ProviderRejectedError,
)
from oauthkit.core.logging import ContextualLogger
from oauthkit.core.logging import logger as default_logger
from oauthkit.domains.oauth.apis import ApiAdapter, OAuth10aApi, OAuth20Api
from oauthkit.domains.oauth.protocols import AsyncTransport, ProtocolStrategy, Transport
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.signing import TimestampService
from oauthkit.domains.oauth.strategies import strategy_for
from oauthkit.domains.oauth.types import (
    OAuthConfig,
    Response,
    Token,
    TokenKind,
    TokenState,
    Verifier,
)


class _BaseOAuthService:
    """State machine and request building shared by the sync and async services."""

    def __init__(
        self,
        config: OAuthConfig,
        api: ApiAdapter,
        *,
        strategy: Optional[ProtocolStrategy] = None,
        timestamps: Optional[TimestampService] = None,
        logger: Optional[ContextualLogger] = None,
        consumed_token_history: Optional[int] = None,
    ) -> None:
        if not isinstance(config, OAuthConfig):
            raise ConfigurationError("config must be an OAuthConfig")
        if not isinstance(api, (OAuth10aApi, OAuth20Api)):
            raise ConfigurationError("api must be an OAuth10aApi or OAuth20Api")

        strategy = strategy or strategy_for(api.version)
        if strategy.version != api.version:
            raise ConfigurationError(
                f"Strategy for OAuth {strategy.version.value} cannot drive "
                f"a {api.version.value} provider ({api.name})"
            )

        self.config = config
        self.api = api
        self.strategy = strategy
        self.timestamps = timestamps or TimestampService()
        self.logger = (logger or default_logger).with_context(
            provider=api.name, oauth_version=api.version.value
        )

        self._lock = threading.Lock()
        self._state = TokenState.UNAUTHENTICATED
        # Exchanged request tokens, oldest first, bounded to _consumed_history entries
        self._consumed_request_tokens: "OrderedDict[Tuple[str, str], None]" = OrderedDict()
        self._in_flight_request_tokens: Set[Tuple[str, str]] = set()
        self._consumed_history = consumed_token_history or settings.CONSUMED_TOKEN_HISTORY

    @property
    def version(self) -> str:
        """Protocol version as it appears on the wire ("1.0" or "2.0")."""
        return self.strategy.version.wire_version

    @property
    def state(self) -> TokenState:
        with self._lock:
            return self._state

    # ------------------------------------------------------------------
    # Pure operations
    # ------------------------------------------------------------------

    def get_authorization_url(self, request_token: Optional[Token] = None) -> str:
        """Build the URL the end user must visit to authorize this client.

        For 1.0a the request token is embedded; for 2.0 the client id,
        callback URL and (when configured) scope are. No network call.
        """
        return self.strategy.authorization_url(self.config, self.api, request_token)

    def sign_request(self, access_token: Token, request: OAuthRequest) -> None:
        """Attach credentials for ``access_token`` to ``request`` in place.

        Raises:
            InvalidTokenStateError: If the token is empty or is a request token.
        """
        if access_token is None or not access_token.value:
            raise InvalidTokenStateError("sign_request requires an access token")
        if access_token.kind == TokenKind.REQUEST:
            raise InvalidTokenStateError(
                "A request token cannot sign requests, exchange it with get_access_token first"
            )
        self.strategy.sign(
            self.config, self.api, access_token, request, self.timestamps, self.logger
        )

    # ------------------------------------------------------------------
    # Step preparation and completion (network call happens in between)
    # ------------------------------------------------------------------

    def _prepare_request_token(self) -> OAuthRequest:
        request = self.strategy.build_request_token_request(
            self.config, self.api, self.timestamps, self.logger
        )
        self.logger.info(f"Requesting request token from {request.sanitized_url}")
        return request

    def _finish_request_token(self, response: Response) -> Token:
        token = self._extract(response, "request token").as_kind(TokenKind.REQUEST)
        with self._lock:
            if self._state == TokenState.UNAUTHENTICATED:
                self._state = TokenState.REQUEST_TOKEN_OBTAINED
        self.logger.info("Successfully obtained request token")
        return token

    def _request_token_key(self, request_token: Optional[Token]) -> Optional[Tuple[str, str]]:
        """Key under which a 1.0a request token is tracked, None when not tracked."""
        if request_token is None or not self.strategy.supports_request_token:
            return None
        return (request_token.value, request_token.secret)

    def _prepare_access_token(
        self, request_token: Optional[Token], verifier: Verifier
    ) -> OAuthRequest:
        if verifier is None:
            raise InvalidTokenStateError("get_access_token requires a verifier")
        key = self._request_token_key(request_token)
        if key is not None and request_token.kind == TokenKind.ACCESS:
            raise InvalidTokenStateError(
                "An access token cannot be exchanged again, pass the request token"
            )

        request = self.strategy.build_access_token_request(
            self.config, self.api, request_token, verifier, self.timestamps, self.logger
        )

        if key is not None:
            with self._lock:
                if key in self._consumed_request_tokens:
                    raise InvalidTokenStateError(
                        "Request token was already exchanged for an access token"
                    )
                if key in self._in_flight_request_tokens:
                    raise InvalidTokenStateError(
                        "Request token is already being exchanged for an access token"
                    )
                self._in_flight_request_tokens.add(key)

        self.logger.info(f"Exchanging verifier for access token at {request.sanitized_url}")
        return request

    def _abort_access_token(self, request_token: Optional[Token]) -> None:
        """Release a request token whose exchange failed so it can be retried."""
        key = self._request_token_key(request_token)
        if key is not None:
            with self._lock:
                self._in_flight_request_tokens.discard(key)

    def _finish_access_token(self, request_token: Optional[Token], response: Response) -> Token:
        try:
            token = self._extract(response, "access token").as_kind(TokenKind.ACCESS)
        except BaseException:
            self._abort_access_token(request_token)
            raise

        key = self._request_token_key(request_token)
        with self._lock:
            if key is not None:
                self._in_flight_request_tokens.discard(key)
                self._consumed_request_tokens[key] = None
                while len(self._consumed_request_tokens) > self._consumed_history:
                    self._consumed_request_tokens.popitem(last=False)
            self._state = TokenState.ACCESS_TOKEN_OBTAINED
        self.logger.info("Successfully obtained access token")
        return token

    def _prepare_refresh(self, token: Token) -> OAuthRequest:
        if token is None:
            raise InvalidTokenStateError("refresh_access_token requires a token")
        request = self.strategy.build_refresh_request(self.config, self.api, token)
        self.logger.info(f"Refreshing access token at {request.sanitized_url}")
        return request

    def _finish_refresh(self, token: Token, response: Response) -> Token:
        refreshed = self._extract(response, "refreshed access token").as_kind(TokenKind.ACCESS)
        if refreshed.refresh_token is None and token.refresh_token:
            # Non-rotating providers omit refresh_token from the refresh response
            refreshed = Token(
                value=refreshed.value,
                raw_response=refreshed.raw_response,
                kind=TokenKind.ACCESS,
                refresh_token=token.refresh_token,
                expires_in=refreshed.expires_in,
                extra=refreshed.extra,
            )
        with self._lock:
            self._state = TokenState.ACCESS_TOKEN_OBTAINED
        self.logger.info("Successfully refreshed access token")
        return refreshed

    def _extract(self, response: Response, what: str) -> Token:
        if not response.is_successful:
            self.logger.error(
                f"Provider rejected {what} request: {response.status_code} - {response.body}"
            )
            raise ProviderRejectedError(response.status_code, response.body)
        try:
            return self.api.token_extractor().extract(response.body)
        except Exception as e:
            self.logger.error(f"Invalid {what} response from provider: {e}")
            raise


class OAuthService(_BaseOAuthService):
    """OAuth service over a blocking transport."""

    def __init__(
        self,
        config: OAuthConfig,
        api: ApiAdapter,
        transport: Transport,
        *,
        strategy: Optional[ProtocolStrategy] = None,
        timestamps: Optional[TimestampService] = None,
        logger: Optional[ContextualLogger] = None,
        consumed_token_history: Optional[int] = None,
    ) -> None:
        """Initialize with injected dependencies."""
        super().__init__(
            config,
            api,
            strategy=strategy,
            timestamps=timestamps,
            logger=logger,
            consumed_token_history=consumed_token_history,
        )
        if transport is None:
            raise ConfigurationError("A transport is required")
        self.transport = transport

    def get_request_token(self) -> Token:
        """Obtain temporary credentials (OAuth 1.0a only).

        Raises:
            UnsupportedOperationError: On an OAuth 2.0 service.
            ProtocolError: If the response lacks the token fields.
        """
        request = self._prepare_request_token()
        response = self.transport.send(request)
        return self._finish_request_token(response)

    def get_access_token(self, request_token: Optional[Token], verifier: Verifier) -> Token:
        """Exchange a verifier (1.0a) or authorization code (2.0) for an access token.

        Args:
            request_token: The request token for 1.0a; ignored (may be None) for 2.0.
            verifier: Verifier or authorization code returned to the callback.

        Returns:
            The access token.
        """
        request = self._prepare_access_token(request_token, verifier)
        try:
            response = self.transport.send(request)
        except BaseException:
            self._abort_access_token(request_token)
            raise
        return self._finish_access_token(request_token, response)

    def refresh_access_token(self, token: Token) -> Token:
        """Exchange the token's refresh token for a new access token (2.0 only)."""
        request = self._prepare_refresh(token)
        response = self.transport.send(request)
        return self._finish_refresh(token, response)


class AsyncOAuthService(_BaseOAuthService):
    """OAuth service over a non-blocking transport.

    Network-bound steps are coroutines; ``get_authorization_url`` and
    ``sign_request`` stay synchronous.
    """

    def __init__(
        self,
        config: OAuthConfig,
        api: ApiAdapter,
        transport: AsyncTransport,
        *,
        strategy: Optional[ProtocolStrategy] = None,
        timestamps: Optional[TimestampService] = None,
        logger: Optional[ContextualLogger] = None,
        consumed_token_history: Optional[int] = None,
    ) -> None:
        """Initialize with injected dependencies."""
        super().__init__(
            config,
            api,
            strategy=strategy,
            timestamps=timestamps,
            logger=logger,
            consumed_token_history=consumed_token_history,
        )
        if transport is None:
            raise ConfigurationError("A transport is required")
        self.transport = transport

    async def get_request_token(self) -> Token:
        """Obtain temporary credentials (OAuth 1.0a only)."""
        request = self._prepare_request_token()
        response = await self.transport.send(request)
        return self._finish_request_token(response)

    async def get_access_token(self, request_token: Optional[Token], verifier: Verifier) -> Token:
        """Exchange a verifier (1.0a) or authorization code (2.0) for an access token."""
        request = self._prepare_access_token(request_token, verifier)
        try:
            response = await self.transport.send(request)
        except BaseException:
            self._abort_access_token(request_token)
            raise
        return self._finish_access_token(request_token, response)

    async def refresh_access_token(self, token: Token) -> Token:
        """Exchange the token's refresh token for a new access token (2.0 only)."""
        request = self._prepare_refresh(token)
        response = await self.transport.send(request)
        return self._finish_refresh(token, response)
