"""
Logging setup shared by the cuisine core services, the API and the scripts.
"""
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FORMATTER = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

# Client libraries that log every HTTP exchange at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def _level_from_env(default: int = logging.INFO) -> int:
    name = os.getenv("LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else default
    return level if isinstance(level, int) else default


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing to stdout; LOG_LEVEL sets its level."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(FORMATTER)
        logger.addHandler(handler)
        logger.setLevel(_level_from_env())
        logger.propagate = False
    return logger


def setup_logging(level: int = None) -> None:
    """
    Configure root logging for entry points (API launcher, scripts).

    Args:
        level: Root level; defaults to LOG_LEVEL or INFO.
    """
    logging.basicConfig(
        level=level if level is not None else _level_from_env(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
