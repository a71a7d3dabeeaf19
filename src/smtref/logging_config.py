"""
Logging setup for smtref.

Library modules log through ``logging.getLogger(__name__)``; nothing is
printed unless the host application calls ``setup_logging``.
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``smtref`` logger.

    Args:
        level: Logging level; defaults to ``SMTREF_LOG_LEVEL`` from the environment
        log_file: Optional path to also write logs to

    Returns:
        The configured package logger
    """
    if level is None:
        from .config import get_settings
        level = get_settings().log_level

    logger = logging.getLogger("smtref")
    logger.setLevel(level)

    # Drop handlers from an earlier call so records are not duplicated
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
