"""Data models and schemas for the scraping wrapper."""

from .schema import ScrapeOption, Operation, OperationMethod, Scenario

__all__ = ["ScrapeOption", "Operation", "OperationMethod", "Scenario"]
