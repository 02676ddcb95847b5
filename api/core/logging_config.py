"""
Logging setup for the API.

Every module gets a child of the `biomas` logger through `get_logger()`, so
one call to `setup_logging()` at startup configures the whole application.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "biomas"


def setup_logging(level: int | str = logging.INFO, log_file: str | None = None) -> None:
    """
    Configure the application logger.

    Args:
        level: logging level (name or number)
        log_file: optional path of an extra file handler
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # setup_logging may run more than once (tests, reload); avoid duplicate output.
    if not any(getattr(h, "_biomas_console", False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler._biomas_console = True  # type: ignore[attr-defined]
        root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for one module, e.g. get_logger("users") -> `biomas.users`.
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
