"""Logging setup for the Black Echo server."""

import logging.config

from config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Route engine and server logs to stdout."""
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level.upper(),
            },
            "uvicorn.access": {
                "level": "WARNING",
            },
        },
    })
