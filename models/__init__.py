"""Data models for DocumentGen API.

This module contains all Pydantic models used throughout the application,
ensuring strict type safety and runtime validation."""

# Import all enums
from .enums import OutputFormat, PageOrientation, PageSize, PlanTier

# Import document models
from .document import DocumentOptions, DocumentRequest, PageMargins, RenderedDocument

# Import plan models
from .plans import PlanLimits

# Import response models
from .responses import ErrorResponse, RateLimitErrorBody, TemplateList, UsageSummary

__all__ = [
    # Enums
    "OutputFormat",
    "PageOrientation",
    "PageSize",
    "PlanTier",
    # Document models
    "DocumentOptions",
    "DocumentRequest",
    "PageMargins",
    "RenderedDocument",
    # Plan models
    "PlanLimits",
    # Response models
    "ErrorResponse",
    "RateLimitErrorBody",
    "TemplateList",
    "UsageSummary",
]
