"""
Browser management for the scraping wrapper.

This module owns the Playwright objects behind a ``ScrapingWrapper``: one
Playwright driver, one Chromium browser, one context and one page.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List, Union
from playwright.sync_api import sync_playwright, Browser, BrowserContext, Page, Playwright
from playwright.sync_api import Error as PlaywrightError
import logging

from ..errors import BrowserNotStartedError
from ..models import ScrapeOption

logger = logging.getLogger(__name__)


class BrowserManager:
    """
    Manages a Playwright browser instance.

    Provides context manager interface for clean browser lifecycle management.
    """

    def __init__(self, option: ScrapeOption):
        """
        Initialize browser manager.

        Args:
            option: Validated scraping options
        """
        self.option = option
        self.headless = option.headless
        self.timeout = option.timeout
        self.viewport = option.viewport
        self.user_agent = option.user_agent

        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None

    def __enter__(self):
        """Enter context manager."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        self.close()
        return False

    def launch_args(self) -> List[str]:
        """Chromium command-line switches for the configured window."""
        args = ['--disable-dev-shm-usage']
        if self.option.window_size is not None:
            width, height = self.option.window_size
            args.append(f'--window-size={width},{height}')
        return args

    def start(self) -> Page:
        """
        Start browser and create a new page.

        Returns:
            Playwright Page object
        """
        try:
            logger.info(f"Starting browser (headless={self.headless})...")

            self.playwright = sync_playwright().start()

            self.browser = self.playwright.chromium.launch(
                headless=self.headless,
                args=self.launch_args()
            )

            context_options: Dict[str, Any] = {}
            if self.viewport:
                context_options['viewport'] = self.viewport
            if self.user_agent:
                context_options['user_agent'] = self.user_agent

            self.context = self.browser.new_context(**context_options)
            self.context.set_default_timeout(self.timeout)

            self.page = self.context.new_page()

            logger.info("Browser started successfully")
            return self.page

        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            self.close()
            raise

    def close(self) -> None:
        """
        Close browser and cleanup resources.

        Each resource is released even if an earlier one fails to close.
        """
        closers = [
            ('page', 'close'),
            ('context', 'close'),
            ('browser', 'close'),
            ('playwright', 'stop'),
        ]
        failed = False

        for attr, method in closers:
            resource = getattr(self, attr)
            if not resource:
                continue
            try:
                getattr(resource, method)()
            except PlaywrightError as e:
                failed = True
                logger.error(f"Error closing {attr}: {e}")
            finally:
                setattr(self, attr, None)

        if not failed:
            logger.info("Browser closed successfully")

    def get_page(self) -> Page:
        """
        Get the current page.

        Returns:
            Playwright Page object

        Raises:
            BrowserNotStartedError: If the browser is not running
        """
        if not self.page:
            raise BrowserNotStartedError("Browser not started")
        return self.page

    def take_screenshot(self, path: Union[str, Path], full_page: bool = True) -> None:
        """
        Take a screenshot of the current page.

        Args:
            path: Path to save screenshot
            full_page: Whether to capture full page
        """
        page = self.get_page()

        try:
            page.screenshot(path=str(path), full_page=full_page)
            logger.info(f"Screenshot saved to: {path}")
        except PlaywrightError as e:
            logger.error(f"Failed to take screenshot: {e}")
