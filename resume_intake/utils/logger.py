"""Logging configuration for the resume intake pipeline."""

import logging
import sys
from typing import Optional

from resume_intake.config import LOG_LEVEL


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Get a configured logger instance. Level defaults to LOG_LEVEL from the environment."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        if level is None:
            level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger
