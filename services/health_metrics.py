"""Health and metrics service for DocumentGen API.

This service provides health monitoring, Prometheus metrics and the periodic
sweep that drops expired rate-limit windows.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from prometheus_client import Counter, Gauge, Histogram, generate_latest

from config import ApplicationConfig
from utils import create_contextual_logger, log_exception

documents_generated = Counter(
    "documents_generated_total",
    "Document generation attempts by outcome",
    ["format", "status"],
)

generation_duration = Histogram(
    "document_generation_duration_seconds",
    "Time spent rendering and converting successful documents",
    ["format"],
)

rate_limit_rejections = Counter(
    "rate_limit_rejections_total",
    "Requests rejected by the per-minute rate limiter",
    ["plan"],
)

browser_connected = Gauge(
    "browser_connected",
    "Whether the shared PDF browser is currently connected",
)

rate_windows_tracked = Gauge(
    "rate_limit_windows_tracked",
    "Caller rate windows currently held in memory",
)


class HealthMetricsService:
    """Health status, metrics snapshot and background housekeeping."""

    def __init__(
        self,
        config: ApplicationConfig,
        browser_manager: Any,
        rate_limiter: Any,
        usage_store: Any,
        redis_client: Optional[Any] = None,
    ) -> None:
        self.config = config
        self.browser_manager = browser_manager
        self.rate_limiter = rate_limiter
        self.usage_store = usage_store
        self.redis_client = redis_client
        self.logger = create_contextual_logger(__name__, service="health_metrics")

        self._start_time = time.time()
        self._prune_task: Optional[asyncio.Task[None]] = None

    def start(self) -> None:
        """Start the rate-window pruning task."""
        interval = self.config.rate_limit_prune_interval_seconds
        if interval <= 0 or self._prune_task is not None:
            return
        self.logger.info("Starting rate window pruning", interval_seconds=interval)
        self._prune_task = asyncio.create_task(self._prune_worker(interval))

    async def stop(self) -> None:
        """Cancel the pruning task and wait for it to finish."""
        if self._prune_task is None:
            return
        self._prune_task.cancel()
        await asyncio.gather(self._prune_task, return_exceptions=True)
        self._prune_task = None
        self.logger.info("Rate window pruning stopped")

    async def _prune_worker(self, interval: int) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                self.rate_limiter.prune_stale()
                rate_windows_tracked.set(len(self.rate_limiter))
            except Exception as e:
                log_exception(self.logger, e, "Rate window pruning failed")

    async def get_health_status(self) -> Dict[str, Any]:
        """Overall status plus per-component detail."""
        components: Dict[str, Any] = {
            # The browser launches lazily, so not running yet is still healthy
            "browser": "connected" if self.browser_manager.is_connected() else "idle",
            "usage_store": self.usage_store.name,
        }
        status = "healthy"
        if self.redis_client is not None:
            redis_health = await self.redis_client.health_check()
            components["redis"] = redis_health.get("status", "unknown")
            if redis_health.get("status") != "healthy":
                status = "degraded"

        return {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": self.config.app_version,
            "uptime_seconds": int(time.time() - self._start_time),
            "components": components,
        }

    async def get_metrics_data(self) -> Dict[str, Any]:
        """JSON-friendly metrics snapshot."""
        connected = self.browser_manager.is_connected()
        browser_connected.set(1 if connected else 0)
        rate_windows_tracked.set(len(self.rate_limiter))
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": int(time.time() - self._start_time),
            "browser": {
                "connected": connected,
                "launch_count": self.browser_manager.launch_count,
            },
            "rate_limiter": {
                "tracked_windows": len(self.rate_limiter),
                "window_seconds": self.config.rate_limit_window_seconds,
            },
            "usage_store": self.usage_store.name,
        }

    def get_prometheus_metrics(self) -> str:
        browser_connected.set(1 if self.browser_manager.is_connected() else 0)
        rate_windows_tracked.set(len(self.rate_limiter))
        return generate_latest().decode("utf-8")
