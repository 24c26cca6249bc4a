"""
Command-line runner for operation scenarios.

Usage:
    common-library --scenario scenarios/google_search.yaml [options]

Options:
    --config PATH               Path to configuration file (default: config/config.yaml)
    --scenario PATH             Scenario file with operations to run
    --headed                    Show the browser window
    --log-level LEVEL           Set log level (DEBUG, INFO, WARNING, ERROR)
    --screenshot-on-error PATH  Save a screenshot when the scenario fails
    --dry-run                   Validate configuration and scenario without a browser
"""

import sys
import argparse
import time
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
import logging

import yaml
from pydantic import ValidationError

from .models import ScrapeOption, Scenario
from .scraping import ScrapingWrapper
from .utils import setup_logger, ScrapingLogger


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ValueError: If the file's top level is not a mapping
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(config).__name__}")
    return config


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Run a scenario of browser operations through the scraping wrapper',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        '--config',
        type=Path,
        default=Path('config/config.yaml'),
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--scenario',
        type=Path,
        help='Path to scenario file (operations, dom_defs, extract)'
    )

    parser.add_argument(
        '--headed',
        action='store_true',
        help='Show the browser window (overrides browser.headless)'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Set log level'
    )

    parser.add_argument(
        '--screenshot-on-error',
        type=Path,
        help='Save a screenshot of the page here if the scenario fails'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Dry run mode - validate config and scenario without starting a browser'
    )

    return parser.parse_args(argv)


def build_option(config: Dict[str, Any], scenario: Optional[Scenario] = None, headed: bool = False) -> ScrapeOption:
    """
    Combine configuration, scenario and command line into scraping options.

    Scenario DOM definitions override those from the configuration file.
    """
    option = ScrapeOption.from_config(config)
    updates: Dict[str, Any] = {}
    if scenario and scenario.dom_defs:
        updates['dom_defs'] = {**option.dom_defs, **scenario.dom_defs}
    if headed:
        updates['headless'] = False
    if updates:
        option = option.model_copy(update=updates)
    return option


def run_scenario(
    option: ScrapeOption,
    scenario: Scenario,
    screenshot_path: Optional[Path] = None
) -> List[Tuple[str, str]]:
    """
    Run a scenario once.

    Args:
        option: Scraping options
        scenario: Operations to perform and texts to extract
        screenshot_path: Where to save a screenshot on failure

    Returns:
        (name, text) pairs for every extracted DOM definition
    """
    scraping_logger = ScrapingLogger(__name__)
    start_time = time.time()
    scraping_logger.log_run_start(f"{len(scenario.operations)} operations")

    with ScrapingWrapper(option) as wrapper:
        try:
            wrapper.operate(scenario.operations)
            results = [(name, wrapper.get_inner_text(name)) for name in scenario.extract]
        except Exception:
            if screenshot_path:
                wrapper.take_screenshot(screenshot_path)
            raise

    scraping_logger.log_run_complete(len(scenario.operations), time.time() - start_time)
    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    if not args.config.exists():
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    logging_config = config.get('logging') or {}
    if args.log_level:
        logging_config['level'] = args.log_level

    # The dictConfig file is looked up next to the configuration file
    logging_config_path = Path(logging_config.get('config', 'logging.yaml'))
    if not logging_config_path.is_absolute():
        logging_config_path = args.config.parent / logging_config_path

    log_dir = Path((logging_config.get('file') or {}).get('directory', 'logs'))
    setup_logger(
        config_path=logging_config_path,
        log_level=logging_config.get('level', 'INFO'),
        log_dir=log_dir
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Configuration loaded from: {args.config}")

    if not args.scenario:
        if args.dry_run:
            option = ScrapeOption.from_config(config)
            logger.info(f"Configuration valid: headless={option.headless}, window_size={option.window_size}")
            return 0
        logger.error("No scenario given (use --scenario)")
        return 1

    try:
        scenario = Scenario.from_yaml(args.scenario)
        option = build_option(config, scenario, headed=args.headed)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error(f"Invalid scenario or configuration: {e}")
        return 1

    if args.dry_run:
        logger.info("=" * 70)
        logger.info("DRY RUN MODE - Configuration and scenario loaded successfully")
        logger.info("=" * 70)
        logger.info(f"Scenario: {args.scenario}")
        logger.info(f"Headless: {option.headless}")
        logger.info(f"Window size: {option.window_size}")
        logger.info(f"Retries: {option.retries} x {option.retry_delay}s")
        logger.info(f"Operations: {len(scenario.operations)}")
        logger.info(f"Extract: {', '.join(scenario.extract) or 'none'}")
        logger.info("=" * 70)
        return 0

    try:
        results = run_scenario(option, scenario, screenshot_path=args.screenshot_on_error)
    except KeyboardInterrupt:
        logger.warning("Scenario interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Scenario failed: {e}", exc_info=True)
        return 1

    for name, text in results:
        print(f"{name}: {text}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
