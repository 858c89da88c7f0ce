"""JSON logging for the application."""

import logging
from typing import Union

from pythonjsonlogger import jsonlogger

FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'


def setup_logger(level: Union[str, int] = logging.INFO) -> None:
    """Send records from every logger to stderr as JSON."""
    handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        FORMAT,
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, jsonlogger.JsonFormatter):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    if isinstance(level, str) and level.isdigit():
        level = int(level)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
