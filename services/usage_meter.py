"""Monthly generation quota tracking."""

from datetime import datetime
from typing import Callable

from models import PlanLimits
from utils import create_contextual_logger, mask_caller_key, utc_now
from .plan_resolver import PlanResolver
from .usage_store import UsageStore


class UsageMeter:
    """Gates generation on the caller's plan and records successful renders."""

    def __init__(
        self,
        plan_resolver: PlanResolver,
        store: UsageStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.plan_resolver = plan_resolver
        self.store = store
        self._clock = clock
        self.logger = create_contextual_logger(__name__, service="usage_meter")

    async def get_usage(self, caller_key: str) -> int:
        """Generations recorded for ``caller_key`` in the current UTC month."""
        return await self.store.count_in_month(caller_key, self._clock())

    async def can_generate(self, caller_key: str) -> bool:
        limits: PlanLimits = self.plan_resolver.get_limits(caller_key)
        usage = await self.get_usage(caller_key)
        allowed = usage < limits.generations_per_month
        if not allowed:
            self.logger.info(
                "Monthly generation quota reached",
                caller_key=mask_caller_key(caller_key),
                plan=limits.tier.value,
                usage=usage,
                limit=limits.generations_per_month,
            )
        return allowed

    async def record_generation(self, caller_key: str, count: int = 1) -> None:
        if count <= 0:
            return
        await self.store.add(caller_key, self._clock(), count)
        self.logger.debug("Generation recorded", caller_key=mask_caller_key(caller_key), count=count)
