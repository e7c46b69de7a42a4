"""Main application entry point for DocumentGen API."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import ApplicationConfig, load_config
from middleware import ApiKeyMiddleware, RateLimitMiddleware, RequestContextMiddleware
from models import ErrorResponse
from routers import documents_router, health_router, metrics_router, usage_router
from services import (
    BrowserManager,
    DocumentService,
    FormatConverter,
    HealthMetricsService,
    InMemoryUsageStore,
    PlanResolver,
    RateLimiter,
    RedisClient,
    RedisUsageStore,
    TemplateRenderer,
    UsageMeter,
    UsageStore,
)
from utils import configure_logging, get_logger, utc_now


def init_app_state(
    app: FastAPI,
    config: ApplicationConfig,
    *,
    browser_manager: Optional[BrowserManager] = None,
    usage_store: Optional[UsageStore] = None,
    redis_client: Optional[RedisClient] = None,
    clock: Callable[[], datetime] = utc_now,
) -> None:
    """Build every service and attach it to ``app.state``.

    This is the composition root. Tests call it directly with a fake browser
    manager instead of running the lifespan.
    """
    plan_resolver = PlanResolver(config.api_keys)
    rate_limiter = RateLimiter(config.rate_limit_window_seconds, clock=clock)

    if usage_store is None:
        if config.usage_store_backend == "redis":
            redis_client = redis_client or RedisClient(config)
            usage_store = RedisUsageStore(config, redis_client)
        else:
            usage_store = InMemoryUsageStore()

    usage_meter = UsageMeter(plan_resolver, usage_store, clock=clock)
    browser_manager = browser_manager or BrowserManager(config)
    converter = FormatConverter(config, browser_manager)
    document_service = DocumentService(usage_meter, TemplateRenderer(), converter)
    health_metrics = HealthMetricsService(
        config, browser_manager, rate_limiter, usage_store, redis_client
    )

    app.state.config = config
    app.state.clock = clock
    app.state.plan_resolver = plan_resolver
    app.state.rate_limiter = rate_limiter
    app.state.usage_store = usage_store
    app.state.usage_meter = usage_meter
    app.state.redis_client = redis_client
    app.state.browser_manager = browser_manager
    app.state.document_service = document_service
    app.state.health_metrics = health_metrics


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start services on boot and release the browser on shutdown."""
    config: ApplicationConfig = app.state.config
    configure_logging(config.log_level, json_output=config.log_json)
    logger = get_logger(__name__)

    init_app_state(app, config)
    redis_client: Optional[RedisClient] = app.state.redis_client
    health_metrics: HealthMetricsService = app.state.health_metrics
    browser_manager: BrowserManager = app.state.browser_manager

    try:
        logger.info("Starting services...", usage_store=app.state.usage_store.name)
        if redis_client is not None:
            await redis_client.connect()
        health_metrics.start()
        logger.info("All services are running.")

        yield

    finally:
        logger.info("Shutting down services...")
        await health_metrics.stop()
        await browser_manager.close()
        if redis_client is not None:
            await redis_client.disconnect()
        logger.info("All services stopped successfully.")


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies get the standard error envelope with a 400."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
        for error in exc.errors()
    )
    body = ErrorResponse(
        error=f"Invalid request: {details}" if details else "Invalid request",
        error_code="validation_error",
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))


def create_app(config: Optional[ApplicationConfig] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or load_config()
    app = FastAPI(
        title=config.app_name,
        description="Template-based document generation (HTML, PDF)",
        version=config.app_version,
        lifespan=lifespan,
    )
    app.state.config = config

    # Starlette wraps middleware in reverse order: the last added runs first
    app.add_middleware(RateLimitMiddleware, path_prefix=config.rate_limit_path_prefix)
    app.add_middleware(
        ApiKeyMiddleware,
        header_name=config.api_key_header,
        query_param=config.api_key_query_param,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[
            "Content-Disposition",
            "X-Request-ID",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
        ],
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(documents_router)
    app.include_router(usage_router)
    app.include_router(health_router)
    app.include_router(metrics_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    config = load_config()
    uvicorn.run(app, host=config.server_host, port=config.server_port)
