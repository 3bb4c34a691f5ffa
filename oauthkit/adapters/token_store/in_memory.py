"""In-memory token store."""

from __future__ import annotations

import threading
from typing import Optional

from oauthkit.domains.oauth.types import Token


class InMemoryTokenStore:
    """Keeps the last saved token for the lifetime of the process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._token: Optional[Token] = None

    def save(self, token: Token) -> None:
        with self._lock:
            self._token = token

    def load(self) -> Optional[Token]:
        with self._lock:
            return self._token
