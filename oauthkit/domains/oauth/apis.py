"""Per-provider configuration (ApiAdapter).

An adapter supplies endpoint URLs, the HTTP verb of each step, the response
format of the token endpoint and, for OAuth 2.0, how the access token is
attached to signed requests. Adapters are frozen after construction and can
be shared between services.
"""

from enum import Enum
from typing import Dict, Literal, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.encoding import percent_encode
from oauthkit.domains.oauth.extractors import TokenFormat, token_extractor_for
from oauthkit.domains.oauth.parameters import ParameterList
from oauthkit.domains.oauth.protocols import Signer, TokenExtractor
from oauthkit.domains.oauth.signing import SIGNERS
from oauthkit.domains.oauth.types import OAuthConfig, ProtocolVersion, Token, Verb


class AccessTokenPlacement(str, Enum):
    """Where an OAuth 2.0 access token is attached when signing a request."""

    QUERY = "query"
    BODY = "body"
    HEADER = "header"


class BaseApiAdapter(BaseModel):
    """Fields shared by both protocol variants."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Provider short name, used in log context")
    authorization_url: str = Field(..., description="Endpoint the end user is sent to")
    access_token_endpoint: str = Field(..., description="Token endpoint")
    access_token_verb: Verb = Field(Verb.POST, description="Verb of the token request")
    token_format: TokenFormat = Field(..., description="Token response body format")
    access_token_headers: Dict[str, str] = Field(
        default_factory=dict, description="Extra headers sent to the token endpoint"
    )

    @field_validator(
        "authorization_url",
        "access_token_endpoint",
        "request_token_endpoint",
        "refresh_token_endpoint",
        check_fields=False,
    )
    @classmethod
    def check_absolute_url(cls, v: Optional[str]) -> Optional[str]:
        """Endpoints must be absolute http(s) URLs."""
        if v is None:
            return v
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"Endpoint must be an absolute http(s) URL: {v!r}")
        return v

    def token_extractor(self) -> TokenExtractor:
        return token_extractor_for(self.token_format)


class OAuth10aApi(BaseApiAdapter):
    """OAuth 1.0a provider definition."""

    version: Literal[ProtocolVersion.OAUTH_10A] = ProtocolVersion.OAUTH_10A
    request_token_endpoint: str = Field(..., description="Temporary credentials endpoint")
    request_token_verb: Verb = Verb.POST
    signature_method: Literal["HMAC-SHA1", "PLAINTEXT"] = "HMAC-SHA1"
    token_format: TokenFormat = TokenFormat.FORM_10A

    def signer(self) -> Signer:
        return SIGNERS[self.signature_method]()

    def get_authorization_url(self, request_token: Token) -> str:
        """Authorize endpoint with the request token appended."""
        separator = "&" if "?" in self.authorization_url else "?"
        return (
            f"{self.authorization_url}{separator}"
            f"{constants.TOKEN}={percent_encode(request_token.value)}"
        )


class OAuth20Api(BaseApiAdapter):
    """OAuth 2.0 authorization-code provider definition."""

    version: Literal[ProtocolVersion.OAUTH_20] = ProtocolVersion.OAUTH_20
    token_format: TokenFormat = TokenFormat.JSON
    grant_type: Optional[str] = "authorization_code"
    include_response_type: bool = True
    client_credential_location: Literal["body", "header"] = "body"
    access_token_param: str = constants.ACCESS_TOKEN
    token_placement: AccessTokenPlacement = AccessTokenPlacement.QUERY
    refresh_token_endpoint: Optional[str] = None

    def get_authorization_url(self, config: OAuthConfig) -> str:
        """Authorize endpoint carrying client id, redirect URI and scope (when set)."""
        params = {}
        if self.include_response_type:
            params[constants.RESPONSE_TYPE] = constants.CODE
        params[constants.CLIENT_ID] = config.api_key
        if config.callback_url is not None:
            params[constants.REDIRECT_URI] = config.callback_url
        if config.has_scope:
            params[constants.SCOPE] = config.scope

        return ParameterList(params).append_to(self.authorization_url)


ApiAdapter = Union[OAuth10aApi, OAuth20Api]


# ---------------------------------------------------------------------------
# Well-known providers
# ---------------------------------------------------------------------------

TWITTER = OAuth10aApi(
    name="twitter",
    request_token_endpoint="https://api.twitter.com/oauth/request_token",
    access_token_endpoint="https://api.twitter.com/oauth/access_token",
    authorization_url="https://api.twitter.com/oauth/authorize",
)

FACEBOOK = OAuth20Api(
    name="facebook",
    authorization_url="https://www.facebook.com/dialog/oauth",
    access_token_endpoint="https://graph.facebook.com/oauth/access_token",
    access_token_verb=Verb.GET,
    token_format=TokenFormat.FORM_20,
    grant_type=None,
)

GITHUB = OAuth20Api(
    name="github",
    authorization_url="https://github.com/login/oauth/authorize",
    access_token_endpoint="https://github.com/login/oauth/access_token",
    access_token_headers={"Accept": "application/json"},
    token_placement=AccessTokenPlacement.HEADER,
)

PROVIDERS: Dict[str, ApiAdapter] = {api.name: api for api in (TWITTER, FACEBOOK, GITHUB)}
