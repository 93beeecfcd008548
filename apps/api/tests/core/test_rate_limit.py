"""
Unit tests for the sliding-window rate limiter.
"""

from unittest.mock import MagicMock, patch

import pytest

from hr_portal.core import rate_limit
from hr_portal.core.rate_limit import check_rate_limit, reset_memory_store


@pytest.fixture(autouse=True)
def clean_store():
    reset_memory_store()
    yield
    reset_memory_store()


class TestMemoryRateLimit:
    """Tests for the in-memory fallback."""

    def test_allows_up_to_limit(self):
        """The first `limit` requests pass, the next one is refused."""
        results = [rate_limit._check_rate_limit_memory("k", 3, 60) for _ in range(4)]
        assert results == [True, True, True, False]

    def test_keys_are_independent(self):
        """Exhausting one key does not affect another."""
        for _ in range(2):
            rate_limit._check_rate_limit_memory("a", 2, 60)
        assert rate_limit._check_rate_limit_memory("a", 2, 60) is False
        assert rate_limit._check_rate_limit_memory("b", 2, 60) is True

    def test_old_entries_leave_the_window(self):
        """Requests older than the window no longer count."""
        with patch("hr_portal.core.rate_limit.time.time", return_value=1000.0):
            assert rate_limit._check_rate_limit_memory("k", 1, 60) is True
            assert rate_limit._check_rate_limit_memory("k", 1, 60) is False
        with patch("hr_portal.core.rate_limit.time.time", return_value=1061.0):
            assert rate_limit._check_rate_limit_memory("k", 1, 60) is True


class TestCheckRateLimit:
    """Tests for backend selection."""

    @pytest.mark.asyncio
    async def test_uses_memory_without_redis(self):
        """No Redis client: the in-memory store decides."""
        with patch("hr_portal.core.redis.redis_client", None):
            assert await check_rate_limit("login:1.2.3.4", 1, 60) is True
            assert await check_rate_limit("login:1.2.3.4", 1, 60) is False

    @pytest.mark.asyncio
    async def test_falls_back_to_memory_when_redis_fails(self):
        """A Redis error is logged and the memory store is used."""
        broken = MagicMock()
        broken.pipeline.side_effect = ConnectionError("redis down")

        with patch("hr_portal.core.redis.redis_client", broken):
            assert await check_rate_limit("apply:1.2.3.4", 1, 60) is True
            assert await check_rate_limit("apply:1.2.3.4", 1, 60) is False
