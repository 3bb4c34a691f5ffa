"""RFC 3986 percent-encoding used for OAuth canonicalization.

Every byte of the UTF-8 representation outside the unreserved set
``A-Z a-z 0-9 - . _ ~`` is written as ``%XX`` with uppercase hex. The result
does not depend on locale or platform.
"""

from urllib.parse import quote, unquote

from oauthkit.core.exceptions import EncodingError


def percent_encode(value: str) -> str:
    """Percent-encode a value according to RFC 3986.

    Raises:
        EncodingError: If ``value`` is not a string or is not representable in UTF-8
            (e.g. contains lone surrogates).
    """
    if not isinstance(value, str):
        raise EncodingError(f"Cannot encode non-string value of type {type(value).__name__}")
    try:
        return quote(value, safe="~", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Value is not representable as UTF-8: {value!r}") from e


def percent_decode(value: str) -> str:
    """Inverse of :func:`percent_encode`.

    ``+`` is left as is; only ``%XX`` sequences are decoded.

    Raises:
        EncodingError: If the decoded bytes are not valid UTF-8.
    """
    if not isinstance(value, str):
        raise EncodingError(f"Cannot decode non-string value of type {type(value).__name__}")
    try:
        return unquote(value, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise EncodingError(f"Percent-encoded value is not valid UTF-8: {value!r}") from e
