"""Response envelopes returned by the HTTP layer."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import PlanTier


class _CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(_CamelResponse):
    """Structured failure envelope."""

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Human readable error")
    error_code: str = Field(..., description="Stable error kind")
    retryable: bool = Field(default=False, description="Whether resubmitting may succeed")
    request_id: Optional[str] = Field(default=None, description="Request identifier")


class RateLimitErrorBody(_CamelResponse):
    """Body returned when the per-minute ceiling is exceeded."""

    error: str = Field(default="Rate limit exceeded")
    message: str = Field(...)
    retry_after: int = Field(default=60, description="Seconds to wait")


class UsageSummary(_CamelResponse):
    """Caller's plan and consumption for the current month."""

    plan: PlanTier
    month: str = Field(..., description="UTC month, YYYY-MM")
    generations_used: int = Field(..., ge=0)
    generations_per_month: int = Field(..., gt=0)
    requests_per_minute: int = Field(..., gt=0)


class TemplateList(_CamelResponse):
    """Identifiers of the built-in templates."""

    templates: List[str]
