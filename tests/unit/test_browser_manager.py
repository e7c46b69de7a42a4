"""Unit tests for the shared browser lifecycle."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.browser_manager import BrowserManager
from services.exceptions import ConversionTimeout, EngineLaunchFailure


class TestBrowserManager:
    """Test cases for BrowserManager."""

    @pytest.mark.asyncio
    async def test_launches_lazily_once(self, browser_manager, fake_launcher) -> None:
        assert browser_manager.is_connected() is False
        assert fake_launcher.calls == 0

        first = await browser_manager.get_browser()
        second = await browser_manager.get_browser()

        assert first is second
        assert fake_launcher.calls == 1
        assert browser_manager.launch_count == 1
        assert browser_manager.is_connected() is True

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_launch(self, app_config, fake_launcher) -> None:
        """Callers racing on a cold start all get the same browser."""

        async def slow_launcher():
            await asyncio.sleep(0.01)
            return await fake_launcher()

        manager = BrowserManager(app_config, launcher=slow_launcher)

        browsers = await asyncio.gather(*(manager.get_browser() for _ in range(20)))

        assert fake_launcher.calls == 1
        assert all(browser is browsers[0] for browser in browsers)

    @pytest.mark.asyncio
    async def test_relaunches_after_disconnect(self, browser_manager, fake_launcher) -> None:
        first = await browser_manager.get_browser()
        first.connected = False

        second = await browser_manager.get_browser()

        assert second is not first
        assert fake_launcher.calls == 2
        assert browser_manager.launch_count == 2

    @pytest.mark.asyncio
    async def test_launch_timeout(self, app_config) -> None:
        async def hanging_launcher():
            await asyncio.sleep(10)

        manager = BrowserManager(app_config, launcher=hanging_launcher)

        with pytest.raises(ConversionTimeout) as exc_info:
            await manager.get_browser()

        assert exc_info.value.retryable is True
        assert manager.is_connected() is False

    @pytest.mark.asyncio
    async def test_launch_failure(self, app_config) -> None:
        async def broken_launcher():
            raise RuntimeError("chromium missing")

        manager = BrowserManager(app_config, launcher=broken_launcher)

        with pytest.raises(EngineLaunchFailure, match="chromium missing") as exc_info:
            await manager.get_browser()

        assert exc_info.value.error_code == "engine_launch_failure"
        assert exc_info.value.status_code == 500
        assert manager.launch_count == 0

    @pytest.mark.asyncio
    async def test_close_releases_browser(self, browser_manager, fake_launcher) -> None:
        browser = await browser_manager.get_browser()

        await browser_manager.close()

        assert browser.closed is True
        assert browser_manager.is_connected() is False

        await browser_manager.get_browser()
        assert fake_launcher.calls == 2

    @pytest.mark.asyncio
    async def test_close_without_browser_is_harmless(self, browser_manager) -> None:
        await browser_manager.close()

        assert browser_manager.is_connected() is False

    @pytest.mark.asyncio
    async def test_failed_launch_discards_driver(self, app_config, fake_launcher) -> None:
        """A dead driver is stopped so the next attempt starts a new one."""
        failures = [RuntimeError("driver gone")]

        async def flaky_launcher():
            if failures:
                raise failures.pop()
            return await fake_launcher()

        manager = BrowserManager(app_config, launcher=flaky_launcher)
        driver = MagicMock()
        driver.stop = AsyncMock(side_effect=Exception("pipe closed"))
        manager._playwright = driver

        with pytest.raises(EngineLaunchFailure):
            await manager.get_browser()

        driver.stop.assert_awaited_once()
        assert manager._playwright is None

        browser = await manager.get_browser()
        assert browser is fake_launcher.latest

    @pytest.mark.asyncio
    async def test_launch_timeout_discards_driver(self, app_config) -> None:
        async def hanging_launcher():
            await asyncio.sleep(10)

        manager = BrowserManager(app_config, launcher=hanging_launcher)
        driver = MagicMock()
        driver.stop = AsyncMock()
        manager._playwright = driver

        with pytest.raises(ConversionTimeout):
            await manager.get_browser()

        driver.stop.assert_awaited_once()
        assert manager._playwright is None
