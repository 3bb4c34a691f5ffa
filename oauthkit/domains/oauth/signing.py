"""OAuth 1.0a signature base string construction and signers.

Reference: RFC 5849 - The OAuth 1.0 Protocol, section 3.4
"""

import base64
import hashlib
import hmac
import secrets
import time
from typing import Callable, Optional

from oauthkit.core.config import settings
from oauthkit.domains.oauth import constants
from oauthkit.domains.oauth.encoding import percent_encode
from oauthkit.domains.oauth.request import OAuthRequest


def build_base_string(request: OAuthRequest) -> str:
    """Build the signature base string.

    Format: HTTP_METHOD&encode(URL)&encode(NORMALIZED_PARAMS)

    Query, body and oauth parameters are merged, each key and value is
    encoded, and the pairs are sorted by encoded key then encoded value so the
    result does not depend on insertion order. ``oauth_signature`` is never
    part of its own base string.
    """
    pairs = []
    for params in (request.query_params, request.body_params, request.oauth_params):
        for key, value in params.encoded_pairs():
            if key == constants.SIGNATURE:
                continue
            pairs.append((key, value))
    pairs.sort()
    param_str = "&".join(f"{k}={v}" for k, v in pairs)

    parts = [
        request.verb.value.upper(),
        percent_encode(request.sanitized_url),
        percent_encode(param_str),
    ]
    return "&".join(parts)


def signing_key(consumer_secret: str, token_secret: str = "") -> str:
    """Signing key: percent_encode(consumer_secret)&percent_encode(token_secret)."""
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


class HmacSha1Signer:
    """HMAC-SHA1 signature method."""

    method = "HMAC-SHA1"

    def sign(self, base_string: str, consumer_secret: str, token_secret: str = "") -> str:
        key_bytes = signing_key(consumer_secret, token_secret).encode("utf-8")
        base_bytes = base_string.encode("utf-8")

        signature_bytes = hmac.new(key_bytes, base_bytes, hashlib.sha1).digest()
        return base64.b64encode(signature_bytes).decode("utf-8")


class PlaintextSigner:
    """PLAINTEXT signature method: the signature is the signing key itself."""

    method = "PLAINTEXT"

    def sign(self, base_string: str, consumer_secret: str, token_secret: str = "") -> str:
        return signing_key(consumer_secret, token_secret)


SIGNERS = {
    HmacSha1Signer.method: HmacSha1Signer,
    PlaintextSigner.method: PlaintextSigner,
}


class TimestampService:
    """Source of timestamps and nonces for 1.0a signing.

    Nonces are hex of ``nonce_bytes`` bytes from :mod:`secrets`, so concurrent
    signers cannot realistically draw the same value within one second.
    """

    def __init__(
        self,
        nonce_bytes: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if nonce_bytes is None:
            nonce_bytes = settings.NONCE_BYTES
        self.nonce_bytes = nonce_bytes
        self._clock = clock

    def timestamp(self) -> str:
        """Seconds since the epoch, as a string."""
        return str(int(self._clock()))

    def nonce(self) -> str:
        return secrets.token_hex(self.nonce_bytes)
