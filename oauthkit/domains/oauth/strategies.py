"""Protocol-variant strategies injected into OAuthService.

Each strategy knows which steps its protocol has, how to build the request
for each step and how to attach credentials to an arbitrary request. The
service owns the state machine and the network boundary; strategies are
stateless and shared.
"""

import base64
from typing import Dict, Optional

from oauthkit.core.config import settings
from oauthkit.core.exceptions import InvalidTokenStateError, UnsupportedOperationError
from oauthkit.core.logging import ContextualLogger
from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.apis import AccessTokenPlacement, OAuth10aApi, OAuth20Api
from oauthkit.domains.oauth.extractors import HeaderExtractor
from oauthkit.domains.oauth.parameters import ParameterList
from oauthkit.domains.oauth.protocols import ProtocolStrategy
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.signing import TimestampService, build_base_string
from oauthkit.domains.oauth.types import (
    OAuthConfig,
    ProtocolVersion,
    SignatureType,
    Token,
    Verifier,
)


class OAuth10aStrategy:
    """Three-legged OAuth 1.0a with HMAC-SHA1 or PLAINTEXT signatures.

    Steps:
    1. Obtain temporary credentials (request token)
    2. Redirect user for authorization
    3. Exchange for access token

    Reference: RFC 5849 - The OAuth 1.0 Protocol
    """

    version = ProtocolVersion.OAUTH_10A
    supports_request_token = True

    def __init__(self) -> None:
        self._header_extractor = HeaderExtractor()

    def build_request_token_request(
        self,
        config: OAuthConfig,
        api: OAuth10aApi,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> OAuthRequest:
        request = OAuthRequest(api.request_token_verb, api.request_token_endpoint)
        request.add_oauth_parameter(
            constants.CALLBACK, config.callback_url or settings.OUT_OF_BAND_CALLBACK
        )
        if config.has_scope:
            request.add_oauth_parameter(constants.SCOPE, config.scope)

        self.sign(config, api, None, request, timestamps, logger)
        return request

    def authorization_url(
        self, config: OAuthConfig, api: OAuth10aApi, request_token: Optional[Token]
    ) -> str:
        if request_token is None or not request_token.value:
            raise InvalidTokenStateError(
                "OAuth 1.0a authorization URL requires the request token from get_request_token"
            )
        return api.get_authorization_url(request_token)

    def build_access_token_request(
        self,
        config: OAuthConfig,
        api: OAuth10aApi,
        request_token: Optional[Token],
        verifier: Verifier,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> OAuthRequest:
        if request_token is None or not request_token.value:
            raise InvalidTokenStateError("OAuth 1.0a access token exchange needs a request token")

        request = OAuthRequest(api.access_token_verb, api.access_token_endpoint)
        for name, value in api.access_token_headers.items():
            request.add_header(name, value)
        request.add_oauth_parameter(constants.VERIFIER, verifier.value)

        self.sign(config, api, request_token, request, timestamps, logger)
        return request

    def build_refresh_request(
        self, config: OAuthConfig, api: OAuth10aApi, token: Token
    ) -> OAuthRequest:
        raise UnsupportedOperationError(
            "refresh_access_token", self.version.value, "OAuth 1.0a tokens do not expire"
        )

    def sign(
        self,
        config: OAuthConfig,
        api: OAuth10aApi,
        token: Optional[Token],
        request: OAuthRequest,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> None:
        signer = api.signer()

        request.add_oauth_parameter(constants.TIMESTAMP, timestamps.timestamp())
        request.add_oauth_parameter(constants.NONCE, timestamps.nonce())
        request.add_oauth_parameter(constants.CONSUMER_KEY, config.api_key)
        request.add_oauth_parameter(constants.SIGNATURE_METHOD, signer.method)
        request.add_oauth_parameter(constants.VERSION, self.version.wire_version)
        if token is not None and token.value:
            request.add_oauth_parameter(constants.TOKEN, token.value)

        # Credentials left in the query by an earlier signing pass
        for key in request.oauth_params:
            request.query_params.remove(key)

        base_string = build_base_string(request)
        logger.debug(f"Signature base string: {base_string}")

        signature = signer.sign(base_string, config.api_secret, token.secret if token else "")
        request.add_oauth_parameter(constants.SIGNATURE, signature)
        request.oauth_params.sort()

        if config.signature_type == SignatureType.HEADER:
            request.add_header(
                constants.AUTHORIZATION_HEADER, self._header_extractor.extract(request)
            )
        else:
            for key, value in request.oauth_params.items():
                request.add_query_parameter(key, value)

        logger.debug(
            f"Signed {request.verb.value} {request.sanitized_url} "
            f"with {signer.method} ({config.signature_type.value})"
        )


class OAuth20Strategy:
    """OAuth 2.0 authorization-code grant. No signatures, bearer tokens only."""

    version = ProtocolVersion.OAUTH_20
    supports_request_token = False

    def build_request_token_request(
        self,
        config: OAuthConfig,
        api: OAuth20Api,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> OAuthRequest:
        raise UnsupportedOperationError(
            "get_request_token",
            self.version.value,
            "please use 'get_authorization_url' and redirect your users there",
        )

    def authorization_url(
        self, config: OAuthConfig, api: OAuth20Api, request_token: Optional[Token]
    ) -> str:
        return api.get_authorization_url(config)

    def build_access_token_request(
        self,
        config: OAuthConfig,
        api: OAuth20Api,
        request_token: Optional[Token],
        verifier: Verifier,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> OAuthRequest:
        params = ParameterList()
        if api.grant_type:
            params.add(constants.GRANT_TYPE, api.grant_type)
        params.add(constants.CODE, verifier.value)
        if config.callback_url is not None:
            params.add(constants.REDIRECT_URI, config.callback_url)
        if config.has_scope:
            params.add(constants.SCOPE, config.scope)

        request = OAuthRequest(api.access_token_verb, api.access_token_endpoint)
        self._attach_token_request_params(config, api, request, params)
        logger.debug(
            f"Authorization code exchange - verb: {request.verb.value}, "
            f"credential location: {api.client_credential_location}, "
            f"code length: {len(verifier.value)}"
        )
        return request

    def build_refresh_request(
        self, config: OAuthConfig, api: OAuth20Api, token: Token
    ) -> OAuthRequest:
        if not token.refresh_token:
            raise InvalidTokenStateError("Token has no refresh_token to exchange")

        params = ParameterList()
        params.add(constants.GRANT_TYPE, constants.REFRESH_TOKEN)
        params.add(constants.REFRESH_TOKEN, token.refresh_token)

        endpoint = api.refresh_token_endpoint or api.access_token_endpoint
        request = OAuthRequest(api.access_token_verb, endpoint)
        self._attach_token_request_params(config, api, request, params)
        return request

    def sign(
        self,
        config: OAuthConfig,
        api: OAuth20Api,
        token: Optional[Token],
        request: OAuthRequest,
        timestamps: TimestampService,
        logger: ContextualLogger,
    ) -> None:
        if token is None or not token.value:
            raise InvalidTokenStateError(
                "OAuth 2.0 requests can only be signed with an access token"
            )

        if api.token_placement == AccessTokenPlacement.HEADER:
            request.add_header(constants.AUTHORIZATION_HEADER, f"Bearer {token.value}")
        elif api.token_placement == AccessTokenPlacement.BODY:
            request.add_body_parameter(api.access_token_param, token.value)
        else:
            request.add_query_parameter(api.access_token_param, token.value)

    def _attach_token_request_params(
        self,
        config: OAuthConfig,
        api: OAuth20Api,
        request: OAuthRequest,
        params: ParameterList,
    ) -> None:
        """Place client credentials and step parameters on a token-endpoint request."""
        for name, value in api.access_token_headers.items():
            request.add_header(name, value)

        if api.client_credential_location == "header":
            encoded = _encode_client_credentials(config.api_key, config.api_secret)
            request.add_header(constants.AUTHORIZATION_HEADER, f"Basic {encoded}")
        else:
            params.add(constants.CLIENT_ID, config.api_key)
            params.add(constants.CLIENT_SECRET, config.api_secret)

        target = request.body_params if request.verb.has_body else request.query_params
        target.add_all(params.items())
        if request.verb.has_body:
            request.add_header(constants.CONTENT_TYPE_HEADER, constants.FORM_CONTENT_TYPE)


def _encode_client_credentials(client_id: str, client_secret: str) -> str:
    """Encodes the client ID and client secret in Base64."""
    creds = f"{client_id}:{client_secret}"
    return base64.b64encode(creds.encode("utf-8")).decode("ascii")


_STRATEGIES: Dict[ProtocolVersion, ProtocolStrategy] = {
    ProtocolVersion.OAUTH_10A: OAuth10aStrategy(),
    ProtocolVersion.OAUTH_20: OAuth20Strategy(),
}


def strategy_for(version: ProtocolVersion) -> ProtocolStrategy:
    """Return the shared strategy for a protocol version."""
    return _STRATEGIES[ProtocolVersion(version)]
