"""OAuth 1.0a / 2.0 client domain: signing, canonicalization and token exchange."""

from oauthkit.domains.oauth.apis import (
    FACEBOOK,
    GITHUB,
    PROVIDERS,
    TWITTER,
    AccessTokenPlacement,
    ApiAdapter,
    OAuth10aApi,
    OAuth20Api,
)
from oauthkit.domains.oauth.builder import ServiceBuilder
from oauthkit.domains.oauth.encoding import percent_decode, percent_encode
from oauthkit.domains.oauth.extractors import (
    Form20TokenExtractor,
    FormTokenExtractor,
    HeaderExtractor,
    JsonTokenExtractor,
    QueryStringExtractor,
    TokenFormat,
    token_extractor_for,
)
from oauthkit.domains.oauth.parameters import ParameterList
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.service import AsyncOAuthService, OAuthService
from oauthkit.domains.oauth.signing import (
    HmacSha1Signer,
    PlaintextSigner,
    TimestampService,
    build_base_string,
)
from oauthkit.domains.oauth.strategies import OAuth10aStrategy, OAuth20Strategy, strategy_for
from oauthkit.domains.oauth.types import (
    OAuthConfig,
    ProtocolVersion,
    Response,
    SignatureType,
    Token,
    TokenKind,
    TokenState,
    Verb,
    Verifier,
)

__all__ = [
    "AccessTokenPlacement",
    "ApiAdapter",
    "AsyncOAuthService",
    "FACEBOOK",
    "Form20TokenExtractor",
    "FormTokenExtractor",
    "GITHUB",
    "HeaderExtractor",
    "HmacSha1Signer",
    "JsonTokenExtractor",
    "OAuth10aApi",
    "OAuth10aStrategy",
    "OAuth20Api",
    "OAuth20Strategy",
    "OAuthConfig",
    "OAuthRequest",
    "OAuthService",
    "PROVIDERS",
    "ParameterList",
    "PlaintextSigner",
    "ProtocolVersion",
    "QueryStringExtractor",
    "Response",
    "ServiceBuilder",
    "SignatureType",
    "TWITTER",
    "TimestampService",
    "Token",
    "TokenFormat",
    "TokenKind",
    "TokenState",
    "Verb",
    "Verifier",
    "build_base_string",
    "percent_decode",
    "percent_encode",
    "strategy_for",
    "token_extractor_for",
]
