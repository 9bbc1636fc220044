"""Headless Chromium session providing live PageHandles."""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import ElementHandle, Page, async_playwright

from scraper.page import PageFault

logger = logging.getLogger(__name__)


class PlaywrightPageHandle:
    """PageHandle over a live Playwright page."""

    def __init__(self, page: Page):
        self.page = page

    async def query_one(self, selector: str) -> Optional[ElementHandle]:
        try:
            return await self.page.query_selector(selector)
        except PlaywrightError as e:
            raise PageFault(f"query_one({selector!r}) failed: {e}") from e

    async def query_all(self, selector: str) -> List[ElementHandle]:
        try:
            return await self.page.query_selector_all(selector)
        except PlaywrightError as e:
            raise PageFault(f"query_all({selector!r}) failed: {e}") from e

    async def text_of(self, element: ElementHandle) -> str:
        try:
            return (await element.inner_text()).strip()
        except PlaywrightError as e:
            raise PageFault(f"Reading element text failed: {e}") from e

    async def attribute_of(self, element: ElementHandle, name: str) -> Optional[str]:
        try:
            return await element.get_attribute(name)
        except PlaywrightError as e:
            raise PageFault(f"Reading attribute {name!r} failed: {e}") from e


class BrowserSession:
    """Launches Chromium, loads one URL and always closes the browser."""

    def __init__(self, timeout_ms: int = 30000, locale: str = 'ms-MY',
                 headless: bool = True, executable_path: Optional[str] = None):
        """
        Initialize the browser session settings.

        Args:
            timeout_ms: Navigation timeout in milliseconds (default: 30000)
            locale: Browser language passed to Chromium (default: ms-MY)
            headless: Run Chromium without a window (default: True)
            executable_path: Prebuilt Chromium binary, e.g. on AWS Lambda
        """
        self.timeout_ms = timeout_ms
        self.locale = locale
        self.headless = headless
        self.executable_path = executable_path

    def launch_args(self) -> List[str]:
        args = ['--no-sandbox', f'--lang={self.locale}']
        if self.executable_path:
            # Lambda has no /dev/shm large enough for Chromium
            args += ['--single-process', '--disable-dev-shm-usage']
        return args

    @asynccontextmanager
    async def open(self, url: str) -> AsyncIterator[PlaywrightPageHandle]:
        """
        Navigate to a URL and yield a ready PageHandle.

        A single navigation attempt is made; failures surface as PageFault.

        Args:
            url: Canonical event URL

        Yields:
            PlaywrightPageHandle for the loaded page
        """
        async with async_playwright() as playwright:
            launch_options: dict[str, Any] = {
                'headless': self.headless,
                'args': self.launch_args(),
            }
            if self.executable_path:
                launch_options['executable_path'] = self.executable_path

            try:
                browser = await playwright.chromium.launch(**launch_options)
            except PlaywrightError as e:
                raise PageFault(f"Failed to launch browser: {e}") from e

            try:
                page = await browser.new_page(locale=self.locale)
                logger.info(f"Navigating to {url} (timeout {self.timeout_ms} ms)")
                await page.goto(url, wait_until='domcontentloaded', timeout=self.timeout_ms)
            except PlaywrightError as e:
                await browser.close()
                raise PageFault(f"Failed to load {url}: {e}") from e

            try:
                yield PlaywrightPageHandle(page)
            finally:
                await browser.close()
                logger.info("Browser closed")
