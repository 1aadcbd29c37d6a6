"""
Logging setup for the command line and library consumers.

Library modules only ever call ``logging.getLogger(__name__)``; nothing is
configured on import. The CLI (or an embedding application) calls
setup_logging() once to attach handlers to the package root logger.

Usage:
    from zootech_analysis.core.logging_config import setup_logging, get_logger

    setup_logging(level="INFO", log_file="analysis.log")
    logger = get_logger(__name__)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from colorama import Fore, Style

PACKAGE_LOGGER_NAME = 'zootech_analysis'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'

LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.BLUE,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColorFormatter(logging.Formatter):
    """Console formatter that colours the level name."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if color and message.startswith(record.levelname):
            message = f"{color}{record.levelname}{Style.RESET_ALL}{message[len(record.levelname):]}"
        return message


def setup_logging(level: str = 'WARNING', log_file: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    """
    Configure the package root logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a file that receives full-format records
        verbose: Force DEBUG regardless of ``level``

    Returns:
        The configured package logger
    """
    numeric_level = logging.DEBUG if verbose else getattr(logging, str(level).upper(), logging.WARNING)

    root = logging.getLogger(PACKAGE_LOGGER_NAME)
    root.setLevel(numeric_level)

    # Repeated calls (tests, CliRunner) must not stack handlers
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    if sys.stderr.isatty():
        console.setFormatter(ColorFormatter(CONSOLE_FORMAT))
    else:
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger; thin wrapper kept so callers import from one place."""
    return logging.getLogger(name)
