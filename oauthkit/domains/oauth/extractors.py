"""Serialization of oauth parameters and parsing of provider token responses."""

import json
from enum import Enum
from typing import Any, Dict
from urllib.parse import parse_qsl

from oauthkit.core.exceptions import ParametersMissingError, ProtocolError
from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.encoding import percent_encode
from oauthkit.domains.oauth.protocols import TokenExtractor
from oauthkit.domains.oauth.request import OAuthRequest
from oauthkit.domains.oauth.types import Token

# ---------------------------------------------------------------------------
# Request credential serialization
# ---------------------------------------------------------------------------


def _check_preconditions(request: OAuthRequest) -> None:
    if request is None or request.oauth_params is None or len(request.oauth_params) == 0:
        raise ParametersMissingError(request)


class HeaderExtractor:
    """Serializes oauth parameters into an ``Authorization`` header value.

    Format: OAuth k1="v1", k2="v2", ...
    Keys appear in the request's oauth-parameter iteration order.
    """

    PREAMBLE = "OAuth "
    PARAM_SEPARATOR = ", "

    def extract(self, request: OAuthRequest) -> str:
        _check_preconditions(request)
        param_strings = [
            f'{key}="{percent_encode(value)}"' for key, value in request.oauth_params.items()
        ]
        return self.PREAMBLE + self.PARAM_SEPARATOR.join(param_strings)


class QueryStringExtractor:
    """Serializes oauth parameters into a ``k1=v1&k2=v2`` query-string fragment."""

    def extract(self, request: OAuthRequest) -> str:
        _check_preconditions(request)
        return request.oauth_params.as_form_urlencoded()


# ---------------------------------------------------------------------------
# Token extraction
# ---------------------------------------------------------------------------


def _check_body(body: str) -> None:
    if body is None or not body.strip():
        raise ProtocolError("Response body is empty, can't extract a token", body)


class FormTokenExtractor:
    """OAuth 1.0a form body: ``oauth_token=...&oauth_token_secret=...``."""

    def extract(self, body: str) -> Token:
        _check_body(body)
        params = dict(parse_qsl(body.strip(), keep_blank_values=True))

        if constants.TOKEN not in params or constants.TOKEN_SECRET not in params:
            raise ProtocolError(
                "Response body is incorrect, can't extract oauth_token and oauth_token_secret",
                body,
            )

        return Token(
            value=params[constants.TOKEN],
            secret=params[constants.TOKEN_SECRET],
            raw_response=body,
            extra={
                k: v
                for k, v in params.items()
                if k not in (constants.TOKEN, constants.TOKEN_SECRET)
            },
        )


class Form20TokenExtractor:
    """OAuth 2.0 form body: ``access_token=...&expires=...``."""

    def extract(self, body: str) -> Token:
        _check_body(body)
        params = dict(parse_qsl(body.strip(), keep_blank_values=True))

        if not params.get(constants.ACCESS_TOKEN):
            raise ProtocolError("Response body is incorrect, can't extract access_token", body)

        return _token_from_fields(params, body)


class JsonTokenExtractor:
    """OAuth 2.0 JSON body: ``{"access_token": "...", ...}``."""

    def extract(self, body: str) -> Token:
        _check_body(body)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise ProtocolError("Response body is not valid JSON", body) from e

        if not isinstance(data, dict) or not data.get(constants.ACCESS_TOKEN):
            raise ProtocolError("Response body is incorrect, can't extract access_token", body)

        return _token_from_fields(data, body)


def _token_from_fields(fields: Dict[str, Any], body: str) -> Token:
    expires_in = fields.get(constants.EXPIRES_IN, fields.get("expires"))
    try:
        expires_in = int(expires_in) if expires_in is not None else None
    except (TypeError, ValueError):
        expires_in = None

    known = (constants.ACCESS_TOKEN, constants.REFRESH_TOKEN, constants.EXPIRES_IN, "expires")
    return Token(
        value=str(fields[constants.ACCESS_TOKEN]),
        secret="",
        raw_response=body,
        refresh_token=fields.get(constants.REFRESH_TOKEN),
        expires_in=expires_in,
        extra={k: v for k, v in fields.items() if k not in known},
    )


class TokenFormat(str, Enum):
    """Shape of a provider's token endpoint response body."""

    FORM_10A = "form_10a"
    FORM_20 = "form_20"
    JSON = "json"


_TOKEN_EXTRACTORS = {
    TokenFormat.FORM_10A: FormTokenExtractor,
    TokenFormat.FORM_20: Form20TokenExtractor,
    TokenFormat.JSON: JsonTokenExtractor,
}


def token_extractor_for(token_format: TokenFormat) -> TokenExtractor:
    """Return the extractor for a response format."""
    return _TOKEN_EXTRACTORS[TokenFormat(token_format)]()
