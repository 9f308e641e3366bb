"""
Logging setup for the ledger.

Console output goes to stderr; an optional log file records ledger
mutations, import summaries and storage failures across CLI runs.
"""

import logging
import sys
from pathlib import Path

from bp_ledger.utils.parameters import LoggingConfig


def setup_logging(config: LoggingConfig, logger_name: str | None = None) -> logging.Logger:
    """
    Attach the configured handlers to the ledger's logger.

    Existing handlers are replaced, so calling this once per CLI command
    never duplicates output.

    Args:
        config: Logging section of the ledger configuration.
        logger_name: Logger to configure, normally the package name
            ``bp_ledger`` so every module logger inherits the handlers.

    Returns:
        The configured logger.
    """
    level = getattr(logging, config.level.upper())

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.handlers.clear()

    formatter = logging.Formatter(config.format)

    if config.console:
        # stdout is reserved for documents piped out of `export`
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the module logger below the ``bp_ledger`` hierarchy."""
    return logging.getLogger(name)
