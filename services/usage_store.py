"""Storage backends for monthly generation usage.

The usage meter only needs two operations: record some generations at a point
in time, and count the generations that fall inside a UTC calendar month.
``InMemoryUsageStore`` keeps every timestamp (single node, tests);
``RedisUsageStore`` keeps one counter per caller per month so several API
nodes can share a quota.
"""

import asyncio
from abc import ABC, abstractmethod
from bisect import bisect_left
from collections import defaultdict
from datetime import datetime
from typing import Dict, List

from config import ApplicationConfig
from utils import month_key, start_of_month, start_of_next_month
from .redis_client import RedisClient


class UsageStore(ABC):
    """Where usage ledgers live."""

    name = "abstract"

    @abstractmethod
    async def add(self, caller_key: str, when: datetime, count: int = 1) -> None:
        """Record ``count`` generations for ``caller_key`` at ``when``."""

    @abstractmethod
    async def count_in_month(self, caller_key: str, moment: datetime) -> int:
        """Generations recorded in the UTC calendar month containing ``moment``."""


class InMemoryUsageStore(UsageStore):
    """Ordered timestamp ledger per caller, never pruned."""

    name = "memory"

    def __init__(self) -> None:
        self._ledgers: Dict[str, List[datetime]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def add(self, caller_key: str, when: datetime, count: int = 1) -> None:
        async with self._lock:
            ledger = self._ledgers[caller_key]
            # Keep the ledger sorted even if a caller passes an older timestamp
            position = bisect_left(ledger, when)
            ledger[position:position] = [when] * count

    async def count_in_month(self, caller_key: str, moment: datetime) -> int:
        month_start = start_of_month(moment)
        month_end = start_of_next_month(moment)
        async with self._lock:
            ledger = self._ledgers.get(caller_key, [])
            return bisect_left(ledger, month_end) - bisect_left(ledger, month_start)


class RedisUsageStore(UsageStore):
    """Month-bucketed counters: ``<prefix>:<caller>:<YYYY-MM>``."""

    name = "redis"

    def __init__(self, config: ApplicationConfig, redis_client: RedisClient) -> None:
        self.config = config
        self.redis_client = redis_client

    def _key(self, caller_key: str, moment: datetime) -> str:
        return f"{self.config.usage_key_prefix}:{caller_key}:{month_key(moment)}"

    async def add(self, caller_key: str, when: datetime, count: int = 1) -> None:
        await self.redis_client.increment(
            self._key(caller_key, when),
            amount=count,
            ttl=self.config.usage_key_ttl_seconds,
        )

    async def count_in_month(self, caller_key: str, moment: datetime) -> int:
        return await self.redis_client.get_counter(self._key(caller_key, moment))
