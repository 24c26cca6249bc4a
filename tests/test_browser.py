"""Tests for BrowserManager."""

import pytest
from unittest.mock import MagicMock, patch

from playwright.sync_api import Error as PlaywrightError

from common_library.errors import BrowserNotStartedError
from common_library.models import ScrapeOption
from common_library.scraping import BrowserManager


@pytest.fixture
def mock_playwright():
    """Patch sync_playwright and return the fake Playwright objects."""
    with patch('common_library.scraping.browser.sync_playwright') as mock_sync:
        playwright = MagicMock()
        browser = playwright.chromium.launch.return_value
        context = browser.new_context.return_value
        page = context.new_page.return_value
        mock_sync.return_value.start.return_value = playwright

        yield {
            'playwright': playwright,
            'browser': browser,
            'context': context,
            'page': page,
        }


class TestBrowserManager:
    """Tests for browser lifecycle."""

    def test_start_with_defaults(self, mock_playwright):
        manager = BrowserManager(ScrapeOption())

        page = manager.start()

        assert page is mock_playwright['page']
        launch_kwargs = mock_playwright['playwright'].chromium.launch.call_args.kwargs
        assert launch_kwargs['headless'] is True
        assert not any(arg.startswith('--window-size') for arg in launch_kwargs['args'])
        mock_playwright['browser'].new_context.assert_called_once_with()
        mock_playwright['context'].set_default_timeout.assert_called_once_with(30000)

    def test_start_with_window_size_and_user_agent(self, mock_playwright):
        option = ScrapeOption(headless=False, window_size=(1920, 1080), user_agent='test-agent')
        manager = BrowserManager(option)

        manager.start()

        launch_kwargs = mock_playwright['playwright'].chromium.launch.call_args.kwargs
        assert launch_kwargs['headless'] is False
        assert '--window-size=1920,1080' in launch_kwargs['args']
        mock_playwright['browser'].new_context.assert_called_once_with(
            viewport={'width': 1920, 'height': 1080},
            user_agent='test-agent'
        )

    def test_context_manager_closes_everything(self, mock_playwright):
        with BrowserManager(ScrapeOption()) as manager:
            assert manager.get_page() is mock_playwright['page']

        mock_playwright['page'].close.assert_called_once()
        mock_playwright['context'].close.assert_called_once()
        mock_playwright['browser'].close.assert_called_once()
        mock_playwright['playwright'].stop.assert_called_once()
        assert manager.page is None
        assert manager.playwright is None

    def test_get_page_before_start(self):
        manager = BrowserManager(ScrapeOption())

        with pytest.raises(BrowserNotStartedError):
            manager.get_page()

    def test_start_failure_cleans_up(self, mock_playwright):
        mock_playwright['playwright'].chromium.launch.side_effect = PlaywrightError("no browser")
        manager = BrowserManager(ScrapeOption())

        with pytest.raises(PlaywrightError):
            manager.start()

        mock_playwright['playwright'].stop.assert_called_once()
        assert manager.browser is None

    def test_close_logs_playwright_errors(self, mock_playwright, caplog):
        manager = BrowserManager(ScrapeOption())
        manager.start()
        mock_playwright['page'].close.side_effect = PlaywrightError("Target closed")

        manager.close()

        assert "Error closing page: Target closed" in caplog.text
        mock_playwright['context'].close.assert_called_once()
        mock_playwright['browser'].close.assert_called_once()
        mock_playwright['playwright'].stop.assert_called_once()
        assert manager.page is None
        assert manager.playwright is None

    def test_close_continues_after_browser_error(self, mock_playwright):
        manager = BrowserManager(ScrapeOption())
        manager.start()
        mock_playwright['browser'].close.side_effect = PlaywrightError("Browser has been closed")

        manager.close()

        mock_playwright['playwright'].stop.assert_called_once()
        assert manager.browser is None

    def test_take_screenshot(self, mock_playwright, tmp_path):
        manager = BrowserManager(ScrapeOption())
        manager.start()

        manager.take_screenshot(tmp_path / 'shot.png', full_page=False)

        mock_playwright['page'].screenshot.assert_called_once_with(
            path=str(tmp_path / 'shot.png'),
            full_page=False
        )
