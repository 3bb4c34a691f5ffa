"""Token store adapters."""

from oauthkit.adapters.token_store.fernet_file import FernetFileTokenStore
from oauthkit.adapters.token_store.in_memory import InMemoryTokenStore

__all__ = [
    "FernetFileTokenStore",
    "InMemoryTokenStore",
]
