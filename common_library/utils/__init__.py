"""Utility modules for the common library."""

from .logger import setup_logger, ScrapingLogger
from .retry import RetryStrategy, retry, with_retry

__all__ = [
    "setup_logger",
    "ScrapingLogger",
    "RetryStrategy",
    "retry",
    "with_retry",
]
