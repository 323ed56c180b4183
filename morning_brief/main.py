#!/usr/bin/env python3
"""
Command-line entry point for the morning brief job.

Runs fetch → summarize → store once, without the HTTP trigger. Useful
from a system cron or for a manual refresh.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from .config import ConfigError, load_config
from .pipeline import build_pipeline, run_pipeline


logger = logging.getLogger(__name__)


def _setup_logging(level: str = "INFO") -> Path:
    """
    Configure logging to both console and file.

    Creates a timestamped log file in the logs/ directory.

    Returns:
        Path to the log file.
    """
    logs_dir = Path("logs")
    logs_dir.mkdir(exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(log_format, date_format))
    root_logger.addHandler(file_handler)

    return log_file


def run_once() -> int:
    """
    Execute the daily brief pipeline.

    Returns:
        Number of summarized items stored.
    """
    config = load_config()
    log_file = _setup_logging(config.log_level)

    logger.info("Starting morning brief run...")
    logger.info(f"Log file: {log_file.absolute()}")

    feed_source, client, store = build_pipeline(config)
    brief = run_pipeline(feed_source, client, store)

    logger.info(f"Morning brief updated: {len(brief.news)} items at {brief.updated_at}")
    return len(brief.news)


def main() -> None:
    """CLI entry point."""
    try:
        run_once()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Morning brief run failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
