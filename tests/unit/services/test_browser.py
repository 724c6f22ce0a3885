import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from aluguel.core.constants import DEFAULT_USER_AGENT
from aluguel.services.browser import BrowserSession


def _mock_playwright():
    context = MagicMock()
    context.new_page = AsyncMock(return_value="page")
    context.close = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    return starter, playwright, browser, context


class TestBrowserSession(unittest.IsolatedAsyncioTestCase):

    @patch('aluguel.services.browser.async_playwright')
    async def test_session_lifecycle(self, mock_async_playwright):
        starter, playwright, browser, context = _mock_playwright()
        mock_async_playwright.return_value = starter

        async with BrowserSession(headless=False, navigation_timeout_ms=5000) as session:
            page = await session.new_page()

        self.assertEqual(page, "page")
        playwright.chromium.launch.assert_awaited_once_with(headless=False)
        browser.new_context.assert_awaited_once_with(user_agent=DEFAULT_USER_AGENT)
        context.set_default_navigation_timeout.assert_called_once_with(5000)
        context.close.assert_awaited_once()
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    async def test_new_page_before_start_raises(self):
        with self.assertRaises(RuntimeError):
            await BrowserSession().new_page()

    async def test_close_without_start_is_noop(self):
        await BrowserSession().close()


if __name__ == '__main__':
    unittest.main()
