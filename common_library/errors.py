"""
Exception types for the common library.

Errors raised by Playwright itself are not wrapped; these cover the
conditions the wrapper detects on its own.
"""

from typing import Iterable, Optional


class ScrapingError(Exception):
    """Base class for errors raised by the scraping wrapper."""


class DomDefinitionError(ScrapingError, KeyError):
    """Raised when an operation refers to a DOM definition that does not exist."""

    def __init__(self, target: str, known: Optional[Iterable[str]] = None):
        self.target = target
        self.known = sorted(known or [])
        super().__init__(target)

    def __str__(self) -> str:
        known = ", ".join(self.known) if self.known else "none"
        return f"Unknown DOM definition '{self.target}' (known: {known})"


class RetryExhaustedError(ScrapingError):
    """Raised when a retried task gets no attempts at all."""


class BrowserNotStartedError(ScrapingError, RuntimeError):
    """Raised when the page is used before the browser starts or after it closes."""
