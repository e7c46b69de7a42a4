"""Lifecycle of the shared headless browser used for PDF export.

One Chromium instance serves every conversion in the process. It is launched
lazily on the first PDF request and relaunched if it is later found
disconnected. The check-then-launch sequence is double-checked: callers look
at the current browser without the lock first, and only contenders for a
launch serialize on it, re-checking once inside so that exactly one launch
happens.

Pages are not managed here; each conversion opens and closes its own.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import Browser, Error as PlaywrightError, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config import ApplicationConfig
from utils import create_contextual_logger, log_exception
from .exceptions import ConversionTimeout, EngineLaunchFailure

Launcher = Callable[[], Awaitable[Browser]]


class BrowserManager:
    """Owns at most one live browser connection."""

    def __init__(self, config: ApplicationConfig, launcher: Optional[Launcher] = None) -> None:
        self.config = config
        self.logger = create_contextual_logger(__name__, service="browser_manager")
        self._launcher: Launcher = launcher or self._launch_chromium
        self._lock = asyncio.Lock()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Any] = None
        self.launch_count = 0

    def is_connected(self) -> bool:
        browser = self._browser
        return browser is not None and browser.is_connected()

    async def get_browser(self) -> Browser:
        """Return the live browser, launching it if needed."""
        if self.is_connected():
            return self._browser

        async with self._lock:
            if not self.is_connected():
                self._browser = await self._launch()
            return self._browser

    async def _launch(self) -> Browser:
        timeout = self.config.browser_launch_timeout_seconds
        self.logger.info(
            "Launching browser",
            relaunch=self._browser is not None,
            timeout_seconds=timeout,
        )
        try:
            browser = await asyncio.wait_for(self._launcher(), timeout=timeout)
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as e:
            log_exception(self.logger, e, "Browser launch timed out", timeout_seconds=timeout)
            await self._stop_driver()
            raise ConversionTimeout(f"Browser launch exceeded {timeout:g}s") from e
        except ConversionTimeout:
            raise
        except Exception as e:
            log_exception(self.logger, e, "Browser launch failed")
            await self._stop_driver()
            raise EngineLaunchFailure(f"Browser could not be started: {e}") from e

        self.launch_count += 1
        self.logger.info("Browser launched successfully", launch_count=self.launch_count)
        return browser

    async def _launch_chromium(self) -> Browser:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return await self._playwright.chromium.launch(
            headless=self.config.browser_headless,
            args=list(self.config.browser_args),
            timeout=self.config.browser_launch_timeout_seconds * 1000,
        )

    async def close(self) -> None:
        """Shut the browser and Playwright down."""
        async with self._lock:
            browser, self._browser = self._browser, None
            if browser is not None:
                try:
                    await browser.close()
                except PlaywrightError as e:
                    self.logger.warning("Error while closing browser", error=str(e))
            await self._stop_driver()
        self.logger.info("Browser manager closed")

    async def _stop_driver(self) -> None:
        """Stop the Playwright driver so the next launch starts a fresh one."""
        playwright, self._playwright = self._playwright, None
        if playwright is None:
            return
        try:
            await playwright.stop()
        except Exception as e:
            self.logger.warning("Error while stopping Playwright driver", error=str(e))
