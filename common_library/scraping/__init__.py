"""Convenience wrapper around Playwright."""

from .browser import BrowserManager
from .wrapper import ScrapingWrapper, DEFAULT_DIALOG_MESSAGE

__all__ = ["ScrapingWrapper", "BrowserManager", "DEFAULT_DIALOG_MESSAGE"]
