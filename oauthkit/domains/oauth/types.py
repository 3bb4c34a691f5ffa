"""Value types for the OAuth domain.

These live in a separate module to avoid circular imports between
service implementations, strategies and protocol definitions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from oauthkit.core.exceptions import ConfigurationError


class Verb(str, Enum):
    """HTTP verbs a request can be sent with."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @property
    def has_body(self) -> bool:
        return self in (Verb.POST, Verb.PUT)


class SignatureType(str, Enum):
    """Where OAuth 1.0a credentials are placed on the outgoing request."""

    HEADER = "header"
    QUERY_STRING = "query_string"


class ProtocolVersion(str, Enum):
    """Protocol variant tag used to select a service strategy."""

    OAUTH_10A = "1.0a"
    OAUTH_20 = "2.0"

    @property
    def wire_version(self) -> str:
        """Version string as it appears on the wire (``oauth_version``)."""
        return "1.0" if self is ProtocolVersion.OAUTH_10A else "2.0"


class TokenState(str, Enum):
    """Lifecycle state of an OAuthService."""

    UNAUTHENTICATED = "unauthenticated"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    ACCESS_TOKEN_OBTAINED = "access_token_obtained"


class TokenKind(str, Enum):
    """Which step of the flow produced a token."""

    REQUEST = "request"
    ACCESS = "access"


@dataclass(frozen=True)
class Token:
    """OAuth token.

    ``secret`` is empty for OAuth 2.0. ``kind`` is None for tokens that were
    not produced by a service in this process (e.g. loaded from a store).
    """

    value: str
    secret: str = ""
    raw_response: Optional[str] = field(default=None, repr=False, compare=False)
    kind: Optional[TokenKind] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def empty(cls) -> "Token":
        return cls(value="", secret="")

    def as_kind(self, kind: TokenKind) -> "Token":
        """Return a copy of this token tagged with ``kind``."""
        return Token(
            value=self.value,
            secret=self.secret,
            raw_response=self.raw_response,
            kind=kind,
            refresh_token=self.refresh_token,
            expires_in=self.expires_in,
            extra=dict(self.extra),
        )


@dataclass(frozen=True)
class Verifier:
    """OAuth 1.0a verifier or OAuth 2.0 authorization code."""

    value: str

    def __post_init__(self) -> None:
        if self.value is None:
            raise ConfigurationError("Verifier value must not be None")


@dataclass(frozen=True)
class Response:
    """Provider response as returned by a transport."""

    status_code: int
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True)
class OAuthConfig:
    """Client credentials and options for one OAuthService.

    ``scope=None`` means no scope is configured; an empty string is a
    configured (empty) scope and is sent as such.
    """

    api_key: str
    api_secret: str
    callback_url: Optional[str] = None
    scope: Optional[str] = None
    signature_type: SignatureType = SignatureType.HEADER

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError("You must provide a valid api_key")
        if not isinstance(self.api_secret, str) or not self.api_secret.strip():
            raise ConfigurationError("You must provide a valid api_secret")
        if not isinstance(self.signature_type, SignatureType):
            try:
                object.__setattr__(self, "signature_type", SignatureType(self.signature_type))
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown signature_type: {self.signature_type!r}"
                ) from e

    @property
    def has_scope(self) -> bool:
        return self.scope is not None
