"""Fake timestamp service for testing."""

from typing import Iterable, Optional


class FakeTimestampService:
    """Returns a fixed timestamp and a fixed (or scripted) sequence of nonces.

    Usage::

        fake = FakeTimestampService(timestamp="1191242096", nonce="kllo9940pd9333jh")
        assert fake.nonce() == "kllo9940pd9333jh"
    """

    def __init__(
        self,
        timestamp: str = "1300000000",
        nonce: str = "fixednonce",
        nonces: Optional[Iterable[str]] = None,
    ) -> None:
        self._timestamp = timestamp
        self._nonce = nonce
        self._nonces = list(nonces) if nonces is not None else None
        self.nonce_bytes = len(nonce) // 2

    def timestamp(self) -> str:
        return self._timestamp

    def nonce(self) -> str:
        if self._nonces:
            return self._nonces.pop(0)
        return self._nonce
