# app/utils/logging.py
import logging

LOGGER_NAME = "floatvid"

logger = logging.getLogger(LOGGER_NAME)

def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the service logger. Safe to call twice."""
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)
