"""
Tests for event_proxy/api/health.py — liveness and readiness endpoints.
"""
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, patch

from event_proxy.api.health import health_check, readiness_check


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_returns_healthy(self):
        result = await health_check()
        assert result["status"] == "healthy"
        assert result["version"] == "1.0.0"

    @pytest.mark.asyncio
    async def test_timestamp_is_utc_iso(self):
        result = await health_check()
        parsed = datetime.fromisoformat(result["timestamp"])
        assert parsed.tzinfo is not None


class TestReadinessCheck:
    @pytest.mark.asyncio
    async def test_redis_up_returns_ready(self, mock_redis):
        result = await readiness_check()
        assert result["status"] == "ready"
        assert result["checks"]["redis"] is True

    @pytest.mark.asyncio
    async def test_redis_down_returns_degraded(self):
        redis = AsyncMock()
        redis.ping = AsyncMock(side_effect=ConnectionError("refused"))
        with patch("event_proxy.services.queue.get_redis", new_callable=AsyncMock, return_value=redis):
            result = await readiness_check()

        assert result["status"] == "degraded"
        assert result["checks"]["redis"] is False

    @pytest.mark.asyncio
    async def test_uses_queue_publisher_ping(self):
        with patch(
            "event_proxy.services.queue.RedisQueuePublisher.ping",
            new_callable=AsyncMock,
            return_value=False,
        ) as mock_ping:
            result = await readiness_check()

        mock_ping.assert_awaited_once()
        assert result["status"] == "degraded"
