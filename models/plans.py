"""Plan limit models for DocumentGen API."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import PlanTier


class PlanLimits(BaseModel):
    """Ceilings attached to a plan tier."""

    tier: PlanTier = Field(..., description="Plan tier")
    requests_per_minute: int = Field(..., gt=0, description="Rate-limit ceiling")
    generations_per_month: int = Field(..., gt=0, description="Monthly usage ceiling")

    model_config = ConfigDict(frozen=True)
