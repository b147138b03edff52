"""Logging helpers."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(message)s"
LOGGER_NAME = "contact_extractor"
NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def configure_logging(verbose: bool = False) -> None:
    """Configure application logging once for CLI usage.

    Worker threads fetch concurrently, so records carry the thread name.
    HTTP library chatter stays at WARNING unless ``verbose`` is set.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger() -> logging.Logger:
    """Return the package logger; pass it explicitly into pipeline components."""
    return logging.getLogger(LOGGER_NAME)
