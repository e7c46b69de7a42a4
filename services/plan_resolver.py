"""Caller key to plan resolution."""

from typing import Dict, Mapping, Optional

from models import PlanLimits, PlanTier

ANONYMOUS_CALLER = "anonymous"

PLAN_LIMITS: Dict[PlanTier, PlanLimits] = {
    PlanTier.FREE: PlanLimits(tier=PlanTier.FREE, requests_per_minute=10, generations_per_month=100),
    PlanTier.STARTER: PlanLimits(tier=PlanTier.STARTER, requests_per_minute=60, generations_per_month=1000),
    PlanTier.GROWTH: PlanLimits(tier=PlanTier.GROWTH, requests_per_minute=300, generations_per_month=10000),
    PlanTier.SCALE: PlanLimits(tier=PlanTier.SCALE, requests_per_minute=600, generations_per_month=50000),
}


def get_plan_limits(tier: Optional[str]) -> PlanLimits:
    """Limits for ``tier``; anything unrecognised gets the free tier's numbers."""
    try:
        return PLAN_LIMITS[PlanTier(tier)]
    except (KeyError, ValueError):
        return PLAN_LIMITS[PlanTier.FREE]


class PlanResolver:
    """Static in-memory table of API keys and their plans."""

    def __init__(self, api_keys: Mapping[str, str]) -> None:
        self._api_keys = dict(api_keys)

    def is_valid(self, caller_key: Optional[str]) -> bool:
        return bool(caller_key) and caller_key in self._api_keys

    def resolve_plan(self, caller_key: Optional[str]) -> PlanTier:
        if not caller_key or caller_key == ANONYMOUS_CALLER:
            return PlanTier.FREE
        return get_plan_limits(self._api_keys.get(caller_key)).tier

    def get_limits(self, caller_key: Optional[str]) -> PlanLimits:
        return PLAN_LIMITS[self.resolve_plan(caller_key)]
