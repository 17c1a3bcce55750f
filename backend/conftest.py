"""Root conftest for pytest configuration and shared fixtures.

Loaded before the colocated tests under iiifauth/, so its fixtures are
available to every package.
"""

import os

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables — must be set before any iiifauth module import
# Uses setdefault so real env vars are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("IIIFAUTH_LOG_LEVEL", "DEBUG")
os.environ.setdefault("IIIFAUTH_PESSIMISTIC_ACCESS_CONTROL", "false")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_fetcher():
    """Fake ResourceFetcher serving seeded responses."""
    from iiifauth.adapters.fetcher.fake import FakeResourceFetcher

    return FakeResourceFetcher()

