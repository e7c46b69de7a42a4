"""Usage router for DocumentGen API."""

from fastapi import APIRouter, Depends, Request

from models import UsageSummary
from services import ANONYMOUS_CALLER, PlanResolver, UsageMeter
from utils import month_key

router = APIRouter(prefix="/api/v1/usage", tags=["usage"])


def get_usage_meter(request: Request) -> UsageMeter:
    """Dependency to get the usage meter from application state."""
    return request.app.state.usage_meter  # type: ignore[no-any-return]


def get_plan_resolver(request: Request) -> PlanResolver:
    """Dependency to get the plan resolver from application state."""
    return request.app.state.plan_resolver  # type: ignore[no-any-return]


@router.get("", response_model=UsageSummary)
async def get_usage(
    request: Request,
    usage_meter: UsageMeter = Depends(get_usage_meter),
    plan_resolver: PlanResolver = Depends(get_plan_resolver),
) -> UsageSummary:
    """Plan and generations used this month for the calling key."""
    caller_key = getattr(request.state, "caller_key", ANONYMOUS_CALLER)
    limits = plan_resolver.get_limits(caller_key)
    return UsageSummary(
        plan=limits.tier,
        month=month_key(request.app.state.clock()),
        generations_used=await usage_meter.get_usage(caller_key),
        generations_per_month=limits.generations_per_month,
        requests_per_minute=limits.requests_per_minute,
    )
