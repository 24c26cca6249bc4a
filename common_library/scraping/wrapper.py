"""
Convenience functions wrapping Playwright.

``ScrapingWrapper`` keeps one page open and exposes a small set of calls
(navigate, look up an element by a named selector, click, type, read text)
that retry on Playwright errors. Elements are referred to by DOM definition
names, which ``ScrapeOption.dom_defs`` maps to CSS selectors.

Example:
    option = ScrapeOption(
        dom_defs={
            'search_text_area': 'textarea[name="q"]',
            'search_button': 'input[name="btnK"]',
            'first_result': 'h3',
        },
        headless=False,
        window_size=(1920, 1080),
    )
    with ScrapingWrapper(option) as wrapper:
        wrapper.operate([
            Operation(method='go', target='https://www.google.com/'),
            Operation(method='fill', target='search_text_area', content='sample text'),
            Operation(method='click', target='search_button'),
        ])
        print(wrapper.get_inner_text('first_result'))
"""

import re
from typing import Optional, Dict, Any, Iterable, List, Union, Callable, TypeVar
from pathlib import Path
import logging

from playwright.sync_api import Locator, Page
from playwright.sync_api import Error as PlaywrightError

from .browser import BrowserManager
from ..errors import DomDefinitionError
from ..models import ScrapeOption, Operation, OperationMethod
from ..utils import ScrapingLogger, retry

logger = logging.getLogger(__name__)

T = TypeVar('T')

DEFAULT_DIALOG_MESSAGE = "Please press OK to continue."

_TAG_NAME_PATTERN = re.compile(r'\*|[A-Za-z_][\w.-]*')


def xpath_literal(text: str) -> str:
    """
    Quote ``text`` as an XPath 1.0 string literal.

    XPath has no escape sequences, so text holding both quote kinds is
    built with ``concat()``.
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{part}'" for part in parts) + ")"


def build_text_xpath(search_text: str, tag_name: str = '*', index: int = 1) -> str:
    """
    Build the XPath matching the ``index``-th ``tag_name`` element whose own
    text, with whitespace normalized, equals ``search_text``.
    """
    if index < 1:
        raise ValueError(f"index must be 1 or greater, got {index}")
    if not _TAG_NAME_PATTERN.fullmatch(tag_name):
        raise ValueError(f"Invalid tag name: {tag_name!r}")
    return f"(//{tag_name}[normalize-space(text())={xpath_literal(search_text)}])[{index}]"


class ScrapingWrapper:
    """
    Main class to manage scraping operations.

    The browser is started on construction and released by ``close()`` or
    by leaving the ``with`` block.
    """

    def __init__(self, option: Optional[ScrapeOption] = None):
        """
        Start the browser and open a page.

        Args:
            option: Scraping options; defaults are used when omitted
        """
        self.option = option or ScrapeOption()
        self.dom_defs: Dict[str, str] = dict(self.option.dom_defs)
        self.logger = ScrapingLogger(__name__)

        self.browser_manager = BrowserManager(self.option)
        self.browser_manager.start()

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        self.close()
        return False

    @property
    def page(self) -> Page:
        """The page all operations run on."""
        return self.browser_manager.get_page()

    def close(self) -> None:
        """Close the browser."""
        self.browser_manager.close()

    def _retry(self, task: Callable[[], T]) -> T:
        return retry(
            task,
            retries=self.option.retries,
            delay=self.option.retry_delay,
            exceptions=(PlaywrightError,)
        )

    def _resolve_selector(self, target: str) -> str:
        try:
            return self.dom_defs[target]
        except KeyError:
            raise DomDefinitionError(target, self.dom_defs.keys()) from None

    def go(self, url: str) -> None:
        """
        Navigate to a URL and wait until the page has loaded.

        Args:
            url: Address to open
        """
        self.logger.log_navigation(url)

        def task():
            self.page.goto(url, timeout=self.option.timeout, wait_until='load')

        self._retry(task)

    def show_dialog_and_wait(self, message: Optional[str] = None) -> None:
        """
        Display an alert dialog and wait for the user to press OK.

        A headless browser has nobody to press OK, so there the dialog is
        accepted as soon as it opens.

        Args:
            message: Dialog text, defaults to DEFAULT_DIALOG_MESSAGE
        """
        dialog_message = DEFAULT_DIALOG_MESSAGE if message is None else message
        page = self.page

        if self.option.headless:
            logger.warning("Browser is headless; accepting dialog without user interaction")
            page.once('dialog', lambda dialog: dialog.accept())
        else:
            # A listener that leaves the dialog open keeps it on screen until the user closes it
            page.once('dialog', lambda dialog: logger.info(f"Waiting for user to close dialog: {dialog.message}"))

        page.evaluate("message => window.alert(message)", dialog_message)

    def get_dom(self, target: str) -> Locator:
        """
        Retrieve an element by DOM definition name.

        Args:
            target: Key of ``dom_defs``

        Returns:
            Locator for the first matching element, scrolled into view

        Raises:
            DomDefinitionError: If ``target`` is not a known DOM definition
        """
        selector = self._resolve_selector(target)

        def task():
            element = self.page.locator(selector).first
            element.wait_for(state='attached', timeout=self.option.element_timeout)
            element.scroll_into_view_if_needed(timeout=self.option.element_timeout)
            return element

        return self._retry(task)

    def click(self, element: Locator) -> None:
        """Click an element and wait for any resulting navigation to load."""
        def task():
            element.click()
            self.page.wait_for_load_state()

        self._retry(task)

    def get_inner_text(self, target: str) -> str:
        """
        Retrieve the inner text of an element.

        Args:
            target: Key of ``dom_defs``

        Returns:
            Rendered text of the element
        """
        def task():
            return self.get_dom(target).inner_text()

        text = self._retry(task)
        self.logger.log_text_extracted(target, text)
        return text

    def fill_textbox(self, element: Locator, content: str) -> None:
        """Type ``content`` into a text field, one key at a time."""
        def task():
            element.press_sequentially(content)

        self._retry(task)

    def get_dom_by_text(
        self,
        search_text: str,
        tag_name: Optional[str] = None,
        index: Optional[int] = None
    ) -> Locator:
        """
        Retrieve an element by its text.

        Args:
            search_text: Exact text of the element, compared after whitespace normalization
            tag_name: Tag to match, any tag when omitted
            index: Which match to return, 1-based, first when omitted

        Returns:
            Locator for the matching element, scrolled into view
        """
        xpath = build_text_xpath(
            search_text,
            tag_name or '*',
            1 if index is None else index
        )

        def task():
            element = self.page.locator(f"xpath={xpath}")
            element.wait_for(state='attached', timeout=self.option.element_timeout)
            element.scroll_into_view_if_needed(timeout=self.option.element_timeout)
            return element

        return self._retry(task)

    def operate(self, operations: Iterable[Union[Operation, Dict[str, Any]]]) -> None:
        """
        Perform a series of operations in order.

        The first failing operation stops the series and its error propagates.

        Args:
            operations: Operation models or dictionaries with the same fields
        """
        steps: List[Operation] = [
            op if isinstance(op, Operation) else Operation.model_validate(op)
            for op in operations
        ]

        for number, operation in enumerate(steps, start=1):
            self.logger.log_operation(number, len(steps), operation.method.value, operation.target)

            if operation.method == OperationMethod.GO:
                self.go(operation.target)
            elif operation.method == OperationMethod.CLICK:
                element = self.get_dom(operation.target)
                self.click(element)
            elif operation.method == OperationMethod.FILL:
                if operation.content is None:
                    self.logger.log_skip("fill without content", operation.target)
                    continue
                element = self.get_dom(operation.target)
                self.fill_textbox(element, operation.content)

    def take_screenshot(self, path: Union[str, Path], full_page: bool = True) -> None:
        """Save a screenshot of the current page."""
        self.browser_manager.take_screenshot(path, full_page=full_page)
