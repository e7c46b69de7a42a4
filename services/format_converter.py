"""Conversion of rendered HTML into the requested output format."""

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config import ApplicationConfig
from models import DocumentOptions, OutputFormat, PageOrientation
from utils import create_contextual_logger
from .browser_manager import BrowserManager
from .exceptions import ConversionError, ConversionNotSupported, ConversionTimeout


class FormatConverter:
    """Dispatches on output format; only PDF touches the browser."""

    def __init__(self, config: ApplicationConfig, browser_manager: BrowserManager) -> None:
        self.config = config
        self.browser_manager = browser_manager
        self.logger = create_contextual_logger(__name__, service="format_converter")

    async def convert(self, markup: str, output_format: OutputFormat, options: DocumentOptions) -> bytes:
        if output_format == OutputFormat.HTML:
            return markup.encode("utf-8")
        if output_format == OutputFormat.PDF:
            return await self.convert_to_pdf(markup, options)
        if output_format == OutputFormat.DOCX:
            raise ConversionNotSupported("DOCX conversion is not implemented")
        raise ConversionNotSupported(f"Format {output_format} not supported")

    async def convert_to_pdf(self, markup: str, options: DocumentOptions) -> bytes:
        browser = await self.browser_manager.get_browser()
        settle_timeout = self.config.content_settle_timeout_seconds
        page = None
        try:
            page = await browser.new_page()
            await page.set_content(
                markup,
                wait_until="networkidle",
                timeout=settle_timeout * 1000,
            )
            return await page.pdf(
                format=options.page_size.value,
                landscape=options.orientation == PageOrientation.LANDSCAPE,
                print_background=True,
                margin={
                    "top": options.margins.top,
                    "right": options.margins.right,
                    "bottom": options.margins.bottom,
                    "left": options.margins.left,
                },
            )
        except PlaywrightTimeoutError as e:
            raise ConversionTimeout(
                f"Content did not settle within {settle_timeout:g}s"
            ) from e
        except PlaywrightError as e:
            raise ConversionError(f"PDF export failed: {e}") from e
        finally:
            if page is not None:
                try:
                    await page.close()
                except PlaywrightError as e:
                    self.logger.warning("Failed to close page", error=str(e))
