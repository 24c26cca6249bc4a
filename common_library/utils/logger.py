"""
Logging utilities for the common library.

This module configures logging for command-line runs, either from a
``dictConfig`` YAML file or with a console plus file fallback, and provides
a logger wrapper with scraping-specific event methods.
"""

import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime
import yaml

PACKAGE_LOGGER = 'common_library'

LOG_FORMAT = '[%(asctime)s] %(levelname)s - %(message)s'
DETAILED_LOG_FORMAT = '[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
    config_path: Optional[Path] = None,
    log_level: Optional[str] = None,
    log_dir: Optional[Path] = None
) -> None:
    """
    Set up logging for a command-line run.

    ``log_level`` wins over any level in the YAML file, for the root logger,
    the package logger and their handlers. Handlers that only take errors
    keep their level.

    Args:
        config_path: Path to logging configuration YAML file
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
    """
    log_dir = Path(log_dir) if log_dir else Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    if config_path and Path(config_path).exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
            logging.config.dictConfig(_with_log_dir(config, log_dir, timestamp))
        except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
            print(f"Failed to load logging config: {e}", file=sys.stderr)
            _setup_basic_logging(log_level, log_dir / f"scraping_{timestamp}.log")
    else:
        _setup_basic_logging(log_level, log_dir / f"scraping_{timestamp}.log")

    if log_level:
        _apply_level(getattr(logging, log_level.upper()))


def _with_log_dir(config: Dict[str, Any], log_dir: Path, timestamp: str) -> Dict[str, Any]:
    """Point the ``file`` and ``error_file`` handlers at timestamped files in log_dir."""
    handlers = config.get('handlers') or {}
    for name, prefix in (('file', 'scraping'), ('error_file', 'errors')):
        if name in handlers:
            handlers[name]['filename'] = str(log_dir / f"{prefix}_{timestamp}.log")
    return config


def _apply_level(level: int) -> None:
    for logger_ in (logging.getLogger(), logging.getLogger(PACKAGE_LOGGER)):
        logger_.setLevel(level)
        for handler in logger_.handlers:
            if handler.level < logging.ERROR:
                handler.setLevel(level)


def _setup_basic_logging(log_level: Optional[str], log_file: Path) -> None:
    """
    Console plus file logging, used when no YAML configuration applies.

    Console output goes to stderr; stdout carries extracted text.
    """
    level = getattr(logging, log_level.upper() if log_level else "INFO")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(DETAILED_LOG_FORMAT, datefmt=DATE_FORMAT))

    logging.basicConfig(level=level, handlers=[console_handler, file_handler], force=True)


class ScrapingLogger:
    """
    Logger wrapper with scraping-specific methods.

    Unknown attributes are delegated to the underlying logger, so it can be
    used anywhere a ``logging.Logger`` is expected.
    """

    def __init__(self, name: str):
        """Initialize scraping logger."""
        self.logger = logging.getLogger(name)

    def log_navigation(self, url: str) -> None:
        """Log page navigation."""
        self.logger.info(f"Navigating to: {url}")

    def log_operation(self, index: int, total: int, method: str, target: str) -> None:
        """Log an operation about to run."""
        self.logger.info(f"Operation {index}/{total}: {method} -> {target}")

    def log_text_extracted(self, target: str, text: str) -> None:
        """Log inner text read from an element."""
        self.logger.debug(f"Extracted text from '{target}': {text!r}")

    def log_skip(self, reason: str, details: Optional[str] = None) -> None:
        """Log skipped operation."""
        message = f"Skipped: {reason}"
        if details:
            message += f" - {details}"
        self.logger.warning(message)

    def log_run_start(self, target: str) -> None:
        """Log scenario start."""
        self.logger.info("=" * 60)
        self.logger.info(f"Starting scenario: {target}")
        self.logger.info("=" * 60)

    def log_run_complete(self, total_operations: int, duration: float) -> None:
        """Log scenario completion."""
        self.logger.info("=" * 60)
        self.logger.info(f"Scenario completed: {total_operations} operations in {duration:.2f}s")
        self.logger.info("=" * 60)

    def __getattr__(self, name):
        """Delegate unknown attributes to underlying logger."""
        return getattr(self.logger, name)
