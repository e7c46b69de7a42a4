"""Per-minute rate limiting for API routes."""

from typing import Callable, Dict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from models import RateLimitErrorBody
from services import ANONYMOUS_CALLER, PlanResolver, RateLimiter
from services.exceptions import RateLimitExceeded
from services.health_metrics import rate_limit_rejections


def rate_limit_headers(limit: int, remaining: int, reset_at: int) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(limit),
        "X-RateLimit-Remaining": str(remaining),
        "X-RateLimit-Reset": str(reset_at),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Admits or rejects requests under ``path_prefix`` by the caller's plan.

    Runs after ``ApiKeyMiddleware`` so ``request.state.caller_key`` is set.
    A slot is consumed at admission, whatever the handler later returns.
    """

    def __init__(self, app, path_prefix: str = "/api"):
        super().__init__(app)
        self.path_prefix = path_prefix.rstrip("/")

    def applies_to(self, path: str) -> bool:
        """Match whole path segments: /api and /api/... but not /apidocs."""
        return path == self.path_prefix or path.startswith(self.path_prefix + "/")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.applies_to(request.url.path):
            return await call_next(request)

        limiter: RateLimiter = request.app.state.rate_limiter
        resolver: PlanResolver = request.app.state.plan_resolver
        caller_key = getattr(request.state, "caller_key", ANONYMOUS_CALLER)
        limits = resolver.get_limits(caller_key)

        try:
            status = limiter.enforce(caller_key, limits.requests_per_minute)
        except RateLimitExceeded as e:
            rate_limit_rejections.labels(plan=limits.tier.value).inc()
            body = RateLimitErrorBody(message=str(e))
            return JSONResponse(
                status_code=429,
                content=body.model_dump(by_alias=True),
                headers=rate_limit_headers(e.limit, 0, e.reset_at),
            )

        response = await call_next(request)
        response.headers.update(rate_limit_headers(status.limit, status.remaining, status.reset_at))
        return response
