"""
Logging Configuration Module

Configures the ``rentestimate`` package logger once per process. Every module
logs through ``get_logger(__name__)`` so output from the model cache, the
estimation service and the API shares one format and one set of handlers.

Usage:
    from rentestimate.logging_config import setup_logging, get_logger

    setup_logging()  # Call once at application startup
    logger = get_logger(__name__)
    logger.info("Model cache ready")
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from rentestimate.config import get_config

PACKAGE_LOGGER = "rentestimate"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("werkzeug", "urllib3", "flask_cors")

_logging_configured = False


def _build_handlers(level: int, log_file: Optional[str]) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to config value or INFO.
        log_file: Path to log file. If None, the configured file (if any) is used.
        force: Force reconfiguration even if already configured.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    config = get_config()
    level_name = (level or config.logging.level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)

    if log_file is None:
        log_file = config.logging.log_file

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()
    for handler in _build_handlers(numeric_level, log_file):
        package_logger.addHandler(handler)
    package_logger.propagate = False

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance.
    """
    if not _logging_configured:
        setup_logging()

    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"

    return logging.getLogger(name)


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _logging_configured
    _logging_configured = False
    logging.getLogger(PACKAGE_LOGGER).handlers.clear()
