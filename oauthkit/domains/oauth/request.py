"""In-flight request model passed through the signing pipeline.

A request is built fresh for each operation and is not safe for concurrent
mutation.
"""

from typing import Dict, Optional, Union
from urllib.parse import urlsplit, urlunsplit

from oauthkit.core.exceptions import PreconditionError
from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.parameters import ParameterList
from oauthkit.domains.oauth.types import Verb

_DEFAULT_PORTS = {"http": 80, "https": 443}


class OAuthRequest:
    """HTTP request carrying query, body and oauth parameter collections."""

    def __init__(self, verb: Union[Verb, str], url: str) -> None:
        self.verb = Verb(verb.upper() if isinstance(verb, str) else verb)
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Request URL must be absolute: {url!r}")
        self.endpoint = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        self.query_params = ParameterList()
        self.query_params.add_query_string(parts.query)
        self.body_params = ParameterList()
        self.oauth_params = ParameterList()
        self.headers: Dict[str, str] = {}
        self.payload: Optional[Union[str, bytes]] = None

    # -- builders --

    def add_query_parameter(self, key: str, value: str) -> None:
        self.query_params.add(key, value)

    def add_body_parameter(self, key: str, value: str) -> None:
        self.body_params.add(key, value)

    def add_oauth_parameter(self, key: str, value: str) -> None:
        """Add a protocol parameter.

        Raises:
            PreconditionError: If ``key`` is neither ``oauth_``-prefixed nor ``scope``.
        """
        if not (key.startswith(constants.PARAM_PREFIX) or key == constants.SCOPE):
            raise PreconditionError(
                f"OAuth parameters must either be '{constants.SCOPE}' "
                f"or start with '{constants.PARAM_PREFIX}', got '{key}'"
            )
        self.oauth_params.add(key, value)

    def add_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def set_payload(self, payload: Union[str, bytes]) -> None:
        """Set a raw body. It replaces form-encoded body parameters when sending."""
        self.payload = payload

    # -- views --

    @property
    def sanitized_url(self) -> str:
        """Base string URI: lowercase scheme/host, no default port, no query.

        An empty path is normalized to ``/``.
        """
        parts = urlsplit(self.endpoint)
        scheme = parts.scheme.lower()
        host = (parts.hostname or "").lower()
        if ":" in host:
            host = f"[{host}]"
        if parts.port is not None and parts.port != _DEFAULT_PORTS.get(scheme):
            host = f"{host}:{parts.port}"
        path = parts.path or "/"
        return urlunsplit((scheme, host, path, "", ""))

    @property
    def complete_url(self) -> str:
        """Endpoint with every query parameter appended."""
        return self.query_params.append_to(self.endpoint)

    def body_contents(self) -> Optional[Union[str, bytes]]:
        """Body to send: the raw payload if set, else form-encoded body parameters."""
        if self.payload is not None:
            return self.payload
        if len(self.body_params):
            return self.body_params.as_form_urlencoded()
        return None

    def __repr__(self) -> str:
        return f"<OAuthRequest {self.verb.value} {self.complete_url}>"
