"""Unit tests for the monthly usage meter and its stores."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from services import InMemoryUsageStore, PlanResolver, RedisUsageStore, UsageMeter
from services.plan_resolver import ANONYMOUS_CALLER


class TestUsageMeter:
    """Test cases for UsageMeter."""

    @pytest.mark.asyncio
    async def test_new_caller_can_generate(self, usage_meter) -> None:
        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 0
        assert await usage_meter.can_generate(ANONYMOUS_CALLER) is True

    @pytest.mark.asyncio
    async def test_caller_exactly_at_quota_is_denied(self, usage_meter) -> None:
        await usage_meter.record_generation(ANONYMOUS_CALLER, 99)
        assert await usage_meter.can_generate(ANONYMOUS_CALLER) is True

        await usage_meter.record_generation(ANONYMOUS_CALLER, 1)

        assert await usage_meter.get_usage(ANONYMOUS_CALLER) == 100
        assert await usage_meter.can_generate(ANONYMOUS_CALLER) is False

    @pytest.mark.asyncio
    async def test_quota_follows_caller_plan(self, usage_meter) -> None:
        """demo-key-123 is on starter with 1000 generations."""
        await usage_meter.record_generation("demo-key-123", 100)

        assert await usage_meter.can_generate("demo-key-123") is True
        assert await usage_meter.can_generate(ANONYMOUS_CALLER) is True

    @pytest.mark.asyncio
    async def test_last_day_of_month_not_counted_next_month(self, plan_resolver, clock) -> None:
        clock.now = datetime(2024, 1, 31, 23, 59, 59, tzinfo=timezone.utc)
        meter = UsageMeter(plan_resolver, InMemoryUsageStore(), clock=clock)
        await meter.record_generation(ANONYMOUS_CALLER, 100)
        assert await meter.can_generate(ANONYMOUS_CALLER) is False

        clock.advance(seconds=1)

        assert await meter.get_usage(ANONYMOUS_CALLER) == 0
        assert await meter.can_generate(ANONYMOUS_CALLER) is True

    @pytest.mark.asyncio
    async def test_non_positive_count_records_nothing(self, usage_meter) -> None:
        await usage_meter.record_generation("caller", 0)
        await usage_meter.record_generation("caller", -3)

        assert await usage_meter.get_usage("caller") == 0


class TestInMemoryUsageStore:
    """Test cases for InMemoryUsageStore."""

    @pytest.mark.asyncio
    async def test_counts_only_the_requested_month(self) -> None:
        store = InMemoryUsageStore()
        await store.add("c", datetime(2024, 2, 1, 0, 0, tzinfo=timezone.utc))
        await store.add("c", datetime(2024, 1, 31, 23, 59, tzinfo=timezone.utc), 2)
        await store.add("c", datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc))
        await store.add("c", datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc))

        january = datetime(2024, 1, 20, tzinfo=timezone.utc)
        february = datetime(2024, 2, 10, tzinfo=timezone.utc)

        assert await store.count_in_month("c", january) == 3
        assert await store.count_in_month("c", february) == 1
        assert await store.count_in_month("other", january) == 0

    @pytest.mark.asyncio
    async def test_december_rolls_into_next_year(self) -> None:
        store = InMemoryUsageStore()
        await store.add("c", datetime(2024, 12, 31, 12, tzinfo=timezone.utc))
        await store.add("c", datetime(2025, 1, 1, 0, tzinfo=timezone.utc))

        assert await store.count_in_month("c", datetime(2024, 12, 1, tzinfo=timezone.utc)) == 1
        assert await store.count_in_month("c", datetime(2025, 1, 1, tzinfo=timezone.utc)) == 1


class TestRedisUsageStore:
    """Test cases for RedisUsageStore."""

    @pytest.fixture
    def redis_client(self) -> AsyncMock:
        client = AsyncMock()
        client.increment = AsyncMock(return_value=1)
        client.get_counter = AsyncMock(return_value=7)
        return client

    @pytest.mark.asyncio
    async def test_add_increments_month_bucket(self, app_config, redis_client) -> None:
        store = RedisUsageStore(app_config, redis_client)

        await store.add("demo-key-123", datetime(2024, 3, 31, 23, 59, tzinfo=timezone.utc), 2)

        redis_client.increment.assert_called_once_with(
            "usage:demo-key-123:2024-03",
            amount=2,
            ttl=app_config.usage_key_ttl_seconds,
        )

    @pytest.mark.asyncio
    async def test_count_reads_month_bucket(self, app_config, redis_client) -> None:
        store = RedisUsageStore(app_config, redis_client)

        count = await store.count_in_month("demo-key-123", datetime(2024, 4, 1, tzinfo=timezone.utc))

        assert count == 7
        redis_client.get_counter.assert_called_once_with("usage:demo-key-123:2024-04")

    @pytest.mark.asyncio
    async def test_meter_over_redis_store_denies_at_quota(self, app_config, redis_client, clock) -> None:
        redis_client.get_counter.return_value = 100
        meter = UsageMeter(PlanResolver(app_config.api_keys), RedisUsageStore(app_config, redis_client), clock=clock)

        assert await meter.can_generate(ANONYMOUS_CALLER) is False
        redis_client.get_counter.assert_called_once_with("usage:anonymous:2024-01")
