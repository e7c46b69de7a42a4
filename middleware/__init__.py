"""HTTP middleware for DocumentGen API."""

from .api_key import ApiKeyMiddleware
from .rate_limit import RateLimitMiddleware, rate_limit_headers
from .request_context import RequestContextMiddleware

__all__ = [
    "ApiKeyMiddleware",
    "RateLimitMiddleware",
    "RequestContextMiddleware",
    "rate_limit_headers",
]
