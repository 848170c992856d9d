"""Logging configuration for the API."""
import logging
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
APP_LOGGER = "app"


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Configure the application's logger with a console handler.

    Only the ``app`` logger tree is touched, so handlers installed by the
    server (or the test runner) on the root logger keep working.

    Args:
        level: Logging level name or number. Defaults to INFO.
    """
    if level is None:
        level = logging.INFO
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)

    # Avoid duplicate handlers when the app is created more than once
    if not any(getattr(h, "_review_api", False) for h in app_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        console_handler._review_api = True
        app_logger.addHandler(console_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    app_logger.info("Logging configured with level: %s", logging.getLevelName(level))
    return app_logger
