"""Structured logging for the geometry codecs.

Every module obtains its logger through get_logger(__name__); applications
(and the CLI) call setup_logger() once to attach handlers.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


class ColoredFormatter(logging.Formatter):
    """Add colors to console output for better readability.

    Colors are only applied to the level name, not the entire message.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname

        if record.levelname in self.COLORS:
            record.levelname = (
                f"{self.COLORS[record.levelname]}"
                f"{record.levelname}"
                f"{self.RESET}"
            )

        formatted = super().format(record)

        record.levelname = original_levelname

        return formatted


def setup_logger(
    name: str = 'geometry_io',
    verbose: bool = True,
    log_file: Optional[Path] = None,
    log_level: str = "INFO"
) -> logging.Logger:
    """
    Configure logging for the geometry codecs.

    Creates a logger with optional file and console handlers. The file handler
    always logs at DEBUG level, while the console handler respects log_level.

    Args:
        name: Logger name (typically 'geometry_io')
        verbose: If True, enable console output. If False, only log to file.
        log_file: Optional file path for persistent logs
        log_level: Console logging level: "DEBUG", "INFO", "WARNING", or "ERROR"

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(verbose=True, log_level='DEBUG')
        >>> logger.debug("Loaded scan.ptx: 1,024 vertices")

    Notes:
        - Calling this multiple times with same name replaces existing handlers
        - Colors are only shown in console, not in file
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.propagate = False

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(fh)

    if verbose:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(getattr(logging, log_level.upper()))
        ch.setFormatter(ColoredFormatter('%(levelname)s: %(message)s'))
        logger.addHandler(ch)

    return logger


def get_logger(name: str = 'geometry_io') -> logging.Logger:
    """
    Get logger instance by name.

    Module loggers are children of 'geometry_io', so they pick up whatever
    setup_logger() attached to the package logger.

    Args:
        name: Logger name to retrieve

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
