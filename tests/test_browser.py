"""Unit tests for the Playwright-backed page handle and browser session."""
import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from scraper.browser import BrowserSession, PlaywrightPageHandle
from scraper.page import PageFault


@pytest.fixture
def mock_browser():
    """Mock async_playwright() chain down to a browser with one page."""
    page = Mock()
    page.goto = AsyncMock()

    browser = Mock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()

    playwright = Mock()
    playwright.chromium.launch = AsyncMock(return_value=browser)

    manager = AsyncMock()
    manager.__aenter__.return_value = playwright

    with patch('scraper.browser.async_playwright', return_value=manager):
        yield playwright, browser, page


class TestPlaywrightPageHandle:
    """Test cases for PlaywrightPageHandle."""

    def test_queries_delegate_to_page(self):
        """Test the four page queries."""
        element = Mock()
        element.inner_text = AsyncMock(return_value='  Evening Social \n')
        element.get_attribute = AsyncMock(return_value='https://cdn.example.com/a.jpg')
        page = Mock()
        page.query_selector = AsyncMock(return_value=element)
        page.query_selector_all = AsyncMock(return_value=[element, element])

        handle = PlaywrightPageHandle(page)

        assert asyncio.run(handle.query_one('h1')) is element
        assert asyncio.run(handle.query_all('li')) == [element, element]
        assert asyncio.run(handle.text_of(element)) == 'Evening Social'
        assert asyncio.run(handle.attribute_of(element, 'src')) == 'https://cdn.example.com/a.jpg'
        page.query_selector.assert_awaited_once_with('h1')
        element.get_attribute.assert_awaited_once_with('src')

    def test_missing_element(self):
        """Test that a missing element is None, not an error."""
        page = Mock()
        page.query_selector = AsyncMock(return_value=None)

        assert asyncio.run(PlaywrightPageHandle(page).query_one('.venue')) is None

    def test_playwright_error_becomes_page_fault(self):
        """Test error translation."""
        page = Mock()
        page.query_selector = AsyncMock(side_effect=PlaywrightError('Target page has been closed'))

        with pytest.raises(PageFault, match='Target page has been closed'):
            asyncio.run(PlaywrightPageHandle(page).query_one('h1'))


class TestBrowserSession:
    """Test cases for BrowserSession."""

    def test_open_navigates_and_closes(self, mock_browser):
        """Test a single navigation and guaranteed close."""
        playwright, browser, page = mock_browser
        session = BrowserSession(timeout_ms=15000, locale='en-US')

        async def use():
            async with session.open('https://lu.ma/ab12CD34') as handle:
                assert isinstance(handle, PlaywrightPageHandle)
                assert handle.page is page
                browser.close.assert_not_awaited()

        asyncio.run(use())

        page.goto.assert_awaited_once_with(
            'https://lu.ma/ab12CD34', wait_until='domcontentloaded', timeout=15000
        )
        browser.new_page.assert_awaited_once_with(locale='en-US')
        browser.close.assert_awaited_once()
        launch_kwargs = playwright.chromium.launch.call_args.kwargs
        assert launch_kwargs['headless'] is True
        assert '--lang=en-US' in launch_kwargs['args']
        assert 'executable_path' not in launch_kwargs

    def test_navigation_error(self, mock_browser):
        """Test that a failed navigation raises PageFault and closes the browser."""
        _, browser, page = mock_browser
        page.goto.side_effect = PlaywrightError('Timeout 30000ms exceeded')

        async def use():
            async with BrowserSession().open('https://lu.ma/ab12CD34'):
                pass

        with pytest.raises(PageFault, match='Timeout 30000ms exceeded'):
            asyncio.run(use())

        browser.close.assert_awaited_once()

    def test_launch_error(self, mock_browser):
        """Test that a failed launch raises PageFault."""
        playwright, _, _ = mock_browser
        playwright.chromium.launch.side_effect = PlaywrightError('Executable does not exist')

        async def use():
            async with BrowserSession().open('https://lu.ma/ab12CD34'):
                pass

        with pytest.raises(PageFault, match='Executable does not exist'):
            asyncio.run(use())

    def test_prebuilt_chromium(self, mock_browser):
        """Test launch options for a prebuilt Chromium binary."""
        playwright, _, _ = mock_browser
        session = BrowserSession(executable_path='/opt/chromium', headless=False)

        async def use():
            async with session.open('https://lu.ma/ab12CD34'):
                pass

        asyncio.run(use())

        launch_kwargs = playwright.chromium.launch.call_args.kwargs
        assert launch_kwargs['executable_path'] == '/opt/chromium'
        assert launch_kwargs['headless'] is False
        assert '--disable-dev-shm-usage' in launch_kwargs['args']
