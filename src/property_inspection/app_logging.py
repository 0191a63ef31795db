"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO.
_QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "googleapiclient.discovery_cache": logging.ERROR,
}


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the package logger and return it.

    Repeated calls only update the level.
    """
    logger = logging.getLogger("property_inspection")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
