"""Logging setup for otelctl."""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    name: str,
    level: Union[str, int] = 'INFO',
    log_file: Optional[Path] = None
) -> logging.Logger:
    """Create or reconfigure a named logger.

    Args:
        name: Logger name (usually __name__)
        level: Log level name or number
        log_file: Optional file to append log records to

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler is added once per logger
    if not any(getattr(h, '_otelctl_console', False) for h in logger.handlers):
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        console._otelctl_console = True
        logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        known = {
            getattr(h, 'baseFilename', None)
            for h in logger.handlers
        }
        if str(log_file.resolve()) not in known:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def set_level(level: Union[str, int]):
    """Apply a level to every otelctl logger created so far."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    for name in list(logging.root.manager.loggerDict):
        if name.startswith('otelctl'):
            logging.getLogger(name).setLevel(level)
