"""Personal common library: convenience wrappers around Playwright."""

from .errors import ScrapingError, DomDefinitionError, RetryExhaustedError, BrowserNotStartedError
from .models import ScrapeOption, Operation, OperationMethod, Scenario
from .scraping import ScrapingWrapper
from .utils import retry

__version__ = "0.1.0"

__all__ = [
    "ScrapingWrapper",
    "ScrapeOption",
    "Operation",
    "OperationMethod",
    "Scenario",
    "retry",
    "ScrapingError",
    "DomDefinitionError",
    "RetryExhaustedError",
    "BrowserNotStartedError",
]
