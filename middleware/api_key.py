"""Caller identification from the API key header or query string."""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from services import ANONYMOUS_CALLER, PlanResolver
from utils import set_caller_key


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Resolves the caller key and plan; unknown keys become anonymous."""

    def __init__(self, app, header_name: str = "X-API-Key", query_param: str = "apiKey"):
        super().__init__(app)
        self.header_name = header_name
        self.query_param = query_param

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        resolver: PlanResolver = request.app.state.plan_resolver

        api_key = request.headers.get(self.header_name) or request.query_params.get(self.query_param)
        if not resolver.is_valid(api_key):
            api_key = ANONYMOUS_CALLER

        request.state.caller_key = api_key
        request.state.plan = resolver.resolve_plan(api_key)
        set_caller_key(api_key)

        return await call_next(request)
