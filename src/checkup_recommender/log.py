"""
Logger setup shared by the UI and the CLI.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | [%(name)s] | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str = "checkup_recommender", level: str = "INFO", stream=None) -> logging.Logger:
    """
    Attach a single handler (stdout unless another stream is given) to the
    package logger. Calling it again only updates the level.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
