"""Fernet-encrypted file token store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from cryptography.fernet import Fernet, InvalidToken

from oauthkit.core.exceptions import ConfigurationError
from oauthkit.domains.oauth.types import Token, TokenKind


def token_to_dict(token: Token) -> Dict[str, Any]:
    return {
        "value": token.value,
        "secret": token.secret,
        "kind": token.kind.value if token.kind else None,
        "refresh_token": token.refresh_token,
        "expires_in": token.expires_in,
        "extra": token.extra,
        "raw_response": token.raw_response,
    }


def token_from_dict(data: Dict[str, Any]) -> Token:
    kind = data.get("kind")
    return Token(
        value=data["value"],
        secret=data.get("secret", ""),
        raw_response=data.get("raw_response"),
        kind=TokenKind(kind) if kind else None,
        refresh_token=data.get("refresh_token"),
        expires_in=data.get("expires_in"),
        extra=data.get("extra") or {},
    )


class FernetFileTokenStore:
    """Stores one token as a Fernet-encrypted JSON document on disk."""

    def __init__(self, path: Union[str, Path], encryption_key: Union[str, bytes]) -> None:
        key = encryption_key.encode() if isinstance(encryption_key, str) else encryption_key
        try:
            self._fernet = Fernet(key)
        except ValueError as e:
            raise ConfigurationError("Invalid Fernet encryption key") from e
        self.path = Path(path)

    def save(self, token: Token) -> None:
        blob = self._fernet.encrypt(json.dumps(token_to_dict(token)).encode())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(blob)
            os.replace(tmp_path, self.path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def load(self) -> Optional[Token]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self._fernet.decrypt(self.path.read_bytes()).decode())
        except InvalidToken as e:
            raise ConfigurationError(
                f"Token file {self.path} cannot be decrypted with the configured key"
            ) from e
        return token_from_dict(data)
