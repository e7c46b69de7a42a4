"""Test utilities and fixtures for DocumentGen API tests."""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from config import ApplicationConfig
from main import create_app, init_app_state
from services import BrowserManager, InMemoryUsageStore, PlanResolver, UsageMeter


class FakeClock:
    """Settable UTC clock passed wherever services accept ``clock=``."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class FakePage:
    """Stands in for a Playwright page."""

    def __init__(self, pdf_bytes: bytes = b"%PDF-1.7 fake", error: Optional[BaseException] = None) -> None:
        self.pdf_bytes = pdf_bytes
        self.error = error
        self.closed = False
        self.content: Optional[str] = None
        self.set_content_kwargs: Dict[str, Any] = {}
        self.pdf_kwargs: Dict[str, Any] = {}

    async def set_content(self, html: str, **kwargs: Any) -> None:
        self.content = html
        self.set_content_kwargs = kwargs
        if self.error is not None:
            raise self.error

    async def pdf(self, **kwargs: Any) -> bytes:
        self.pdf_kwargs = kwargs
        return self.pdf_bytes

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    """Stands in for a Playwright browser; ``page_error`` makes pages fail."""

    def __init__(self) -> None:
        self.connected = True
        self.closed = False
        self.page_error: Optional[BaseException] = None
        self.new_page_error: Optional[BaseException] = None
        self.pages: List[FakePage] = []

    def is_connected(self) -> bool:
        return self.connected

    async def new_page(self) -> FakePage:
        if self.new_page_error is not None:
            raise self.new_page_error
        page = FakePage(error=self.page_error)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        self.closed = True
        self.connected = False


class FakeLauncher:
    """Counts launches and hands out fresh ``FakeBrowser`` instances."""

    def __init__(self) -> None:
        self.calls = 0
        self.browsers: List[FakeBrowser] = []

    async def __call__(self) -> FakeBrowser:
        self.calls += 1
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser

    @property
    def latest(self) -> FakeBrowser:
        return self.browsers[-1]


@pytest.fixture
def app_config() -> ApplicationConfig:
    """Configuration isolated from any local .env file."""
    return ApplicationConfig(
        _env_file=None,
        rate_limit_prune_interval_seconds=0,
        browser_launch_timeout_seconds=0.2,
        content_settle_timeout_seconds=0.2,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 15, 10, 0, 30, tzinfo=timezone.utc))


@pytest.fixture
def fake_launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def browser_manager(app_config: ApplicationConfig, fake_launcher: FakeLauncher) -> BrowserManager:
    return BrowserManager(app_config, launcher=fake_launcher)


@pytest.fixture
def plan_resolver(app_config: ApplicationConfig) -> PlanResolver:
    return PlanResolver(app_config.api_keys)


@pytest.fixture
def usage_meter(plan_resolver: PlanResolver, clock: FakeClock) -> UsageMeter:
    return UsageMeter(plan_resolver, InMemoryUsageStore(), clock=clock)


@pytest.fixture
def app(app_config: ApplicationConfig, browser_manager: BrowserManager, clock: FakeClock) -> FastAPI:
    """Application with services wired to the fake browser and clock, no lifespan."""
    application = create_app(app_config)
    init_app_state(application, app_config, browser_manager=browser_manager, clock=clock)
    return application


@pytest_asyncio.fixture(scope="function")
async def test_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for the app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

