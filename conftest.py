"""Root conftest for pytest configuration and shared fixtures.

Fixtures here are available to every colocated test package
(oauthkit/**/tests).
"""

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_transport():
    """Fake blocking Transport that records sent requests."""
    from oauthkit.adapters.transport.fake import FakeTransport

    return FakeTransport()


@pytest.fixture
def fake_async_transport():
    """Fake AsyncTransport that records sent requests."""
    from oauthkit.adapters.transport.fake import FakeAsyncTransport

    return FakeAsyncTransport()


@pytest.fixture
def fake_timestamps():
    """Deterministic timestamp/nonce source."""
    from oauthkit.domains.oauth.fakes.timestamps import FakeTimestampService

    return FakeTimestampService()


@pytest.fixture
def test_logger():
    """Contextual logger tagged for tests."""
    from oauthkit.core.logging import logger

    return logger.with_context(request_id="test-oauth")
