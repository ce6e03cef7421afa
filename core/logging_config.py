# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "textile_erp"

# httpx logs every request at INFO; list controllers fetch on each keystroke pause
NOISY_LOGGERS = ("httpx", "httpcore")


def resolve_level(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Handlers survive app re-creation (tests create one app per test)
    if logger.handlers:
        return logger

    logger.setLevel(resolve_level(settings.LOG_LEVEL))
    logger.propagate = False

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


logger = setup_logger()
