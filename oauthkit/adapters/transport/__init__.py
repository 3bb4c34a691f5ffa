"""Transport adapters."""

from oauthkit.adapters.transport.fake import FakeAsyncTransport, FakeTransport
from oauthkit.adapters.transport.httpx_transport import AsyncHttpxTransport, HttpxTransport

__all__ = [
    "AsyncHttpxTransport",
    "FakeAsyncTransport",
    "FakeTransport",
    "HttpxTransport",
]
