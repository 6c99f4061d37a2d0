import logging
import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_LOGGERS = {}


def get_logger(name: str) -> logging.Logger:
    """
    Create or retrieve a named logger under the ``dancewithme`` namespace.

    Each logger gets one console handler; repeated calls return the cached
    instance so handlers are never stacked.
    """
    if name in _LOGGERS:
        return _LOGGERS[name]

    logger = logging.getLogger(f"dancewithme.{name}")
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    logger.propagate = False
    _LOGGERS[name] = logger

    return logger
