"""Middleware for handling request IDs in FastAPI requests."""

import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from utils import clear_request_context, get_logger, set_request_id

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns every request an ID used in logs and error envelopes."""

    def __init__(self, app, request_id_header: str = "X-Request-ID"):
        super().__init__(app)
        self.request_id_header = request_id_header

    @staticmethod
    def _parse_request_id(value: Optional[str]) -> str:
        """Keep a client-supplied UUID, mint a new one for anything else."""
        if not value:
            return str(uuid.uuid4())
        try:
            return str(uuid.UUID(value))
        except ValueError:
            return str(uuid.uuid4())

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Set request ID for the request context."""
        request_id = self._parse_request_id(request.headers.get(self.request_id_header))

        set_request_id(request_id)
        request.state.request_id = request_id

        logger.info(
            f"HTTP request received: {request.method} {request.url.path}",
            method=request.method,
            path=request.url.path,
            user_agent=request.headers.get("user-agent"),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)

            response.headers[self.request_id_header] = request_id

            logger.info(
                f"HTTP request completed: {request.method} {request.url.path}",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                success=200 <= response.status_code < 400,
            )
            return response
        finally:
            clear_request_context()
