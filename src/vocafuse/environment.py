"""Environment detection based on the API key prefix."""

from __future__ import annotations

from .config import LIVE_API_URL, LIVE_KEY_PREFIX, TEST_API_URL, TEST_KEY_PREFIX


def resolve_base_url(api_key: str) -> str:
    """Return the API endpoint matching the environment encoded in *api_key*.

    Keys without a recognised prefix resolve to the live endpoint.
    """
    if api_key.startswith(LIVE_KEY_PREFIX):
        return LIVE_API_URL
    if api_key.startswith(TEST_KEY_PREFIX):
        return TEST_API_URL
    return LIVE_API_URL


def is_test_key(api_key: str) -> bool:
    """Return ``True`` when *api_key* targets the test environment."""
    return api_key.startswith(TEST_KEY_PREFIX)


def is_live_key(api_key: str) -> bool:
    """Return ``True`` when *api_key* targets the live environment."""
    return api_key.startswith(LIVE_KEY_PREFIX)
