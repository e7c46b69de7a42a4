"""Service layer for DocumentGen API."""

from .browser_manager import BrowserManager
from .document_service import DocumentService
from .format_converter import FormatConverter
from .health_metrics import HealthMetricsService
from .plan_resolver import ANONYMOUS_CALLER, PlanResolver, get_plan_limits
from .rate_limiter import RateLimiter, RateLimitStatus
from .redis_client import RedisClient
from .template_renderer import TemplateRenderer
from .template_store import list_templates, lookup_template
from .usage_meter import UsageMeter
from .usage_store import InMemoryUsageStore, RedisUsageStore, UsageStore

__all__ = [
    "ANONYMOUS_CALLER",
    "BrowserManager",
    "DocumentService",
    "FormatConverter",
    "HealthMetricsService",
    "InMemoryUsageStore",
    "PlanResolver",
    "RateLimitStatus",
    "RateLimiter",
    "RedisClient",
    "RedisUsageStore",
    "TemplateRenderer",
    "UsageMeter",
    "UsageStore",
    "get_plan_limits",
    "list_templates",
    "lookup_template",
]
