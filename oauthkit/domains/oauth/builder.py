"""Fluent construction of OAuth services.

Usage::

    service = (
        ServiceBuilder()
        .provider("twitter")
        .api_key("key")
        .api_secret("secret")
        .callback("https://app.example.com/callback")
        .transport(HttpxTransport())
        .build()
    )
"""

from typing import Optional, Union

from oauthkit.core.exceptions import ConfigurationError
from oauthkit.core.logging import ContextualLogger
from oauthkit.domains.oauth.apis import PROVIDERS, ApiAdapter
from oauthkit.domains.oauth.protocols import AsyncTransport, Transport
from oauthkit.domains.oauth.service import AsyncOAuthService, OAuthService
from oauthkit.domains.oauth.signing import TimestampService
from oauthkit.domains.oauth.types import OAuthConfig, SignatureType


class ServiceBuilder:
    """Collects configuration and builds an OAuthService or AsyncOAuthService."""

    def __init__(self) -> None:
        self._api: Optional[ApiAdapter] = None
        self._api_key: Optional[str] = None
        self._api_secret: Optional[str] = None
        self._callback: Optional[str] = None
        self._scope: Optional[str] = None
        self._signature_type = SignatureType.HEADER
        self._transport: Optional[Union[Transport, AsyncTransport]] = None
        self._timestamps: Optional[TimestampService] = None
        self._logger: Optional[ContextualLogger] = None

    def provider(self, api: Union[ApiAdapter, str]) -> "ServiceBuilder":
        """Set the provider, either an adapter or the name of a well-known one."""
        if isinstance(api, str):
            try:
                api = PROVIDERS[api]
            except KeyError as e:
                raise ConfigurationError(f"Unknown provider: {api}") from e
        self._api = api
        return self

    def api_key(self, api_key: str) -> "ServiceBuilder":
        self._api_key = api_key
        return self

    def api_secret(self, api_secret: str) -> "ServiceBuilder":
        self._api_secret = api_secret
        return self

    def callback(self, callback_url: str) -> "ServiceBuilder":
        if not callback_url:
            raise ConfigurationError("Callback URL must not be empty")
        self._callback = callback_url
        return self

    def scope(self, scope: str) -> "ServiceBuilder":
        if scope is None:
            raise ConfigurationError("Scope must not be None")
        self._scope = scope
        return self

    def signature_type(self, signature_type: SignatureType) -> "ServiceBuilder":
        self._signature_type = SignatureType(signature_type)
        return self

    def transport(self, transport: Union[Transport, AsyncTransport]) -> "ServiceBuilder":
        self._transport = transport
        return self

    def timestamps(self, timestamps: TimestampService) -> "ServiceBuilder":
        self._timestamps = timestamps
        return self

    def logger(self, logger: ContextualLogger) -> "ServiceBuilder":
        self._logger = logger
        return self

    def _config(self) -> OAuthConfig:
        if self._api is None:
            raise ConfigurationError("You must specify a provider, call provider() first")
        return OAuthConfig(
            api_key=self._api_key,
            api_secret=self._api_secret,
            callback_url=self._callback,
            scope=self._scope,
            signature_type=self._signature_type,
        )

    def build(self) -> OAuthService:
        """Build a blocking service."""
        config = self._config()
        return OAuthService(
            config,
            self._api,
            self._transport,
            timestamps=self._timestamps,
            logger=self._logger,
        )

    def build_async(self) -> AsyncOAuthService:
        """Build a non-blocking service."""
        config = self._config()
        return AsyncOAuthService(
            config,
            self._api,
            self._transport,
            timestamps=self._timestamps,
            logger=self._logger,
        )
