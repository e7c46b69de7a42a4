"""API routers for DocumentGen API."""

from .documents import router as documents_router
from .health import router as health_router
from .metrics import router as metrics_router
from .usage import router as usage_router

__all__ = ["documents_router", "health_router", "metrics_router", "usage_router"]
