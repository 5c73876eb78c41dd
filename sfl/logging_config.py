"""Centralized logging configuration for the SFL scoring engine."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'sfl' logger hierarchy.

    Module loggers (sfl.ledger, sfl.league, ...) propagate here, so one call
    at program start covers the whole package.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Whether to write a timestamped log file (default: True)
        log_to_console: Whether to log to stderr (default: True)

    Returns:
        Configured logger instance

    Example:
        from sfl.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Recording episode 4")
    """
    logger = logging.getLogger('sfl')
    logger.setLevel(level)

    # Clear any existing handlers
    logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(name)s: %(message)s')

    if log_to_file:
        if log_dir is None:
            log_dir = Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'sfl_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        # stdout carries command output; diagnostics go to stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = 'sfl') -> logging.Logger:
    """Get a logger in the 'sfl' hierarchy."""
    if name != 'sfl' and not name.startswith('sfl.'):
        name = f'sfl.{name}'
    return logging.getLogger(name)
