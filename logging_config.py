#!/usr/bin/env python3
"""
Centralized logging configuration.

Usage:
    from logging_config import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = None) -> logging.Logger:
    """Get or create a console logger. Handlers are attached only once per name."""
    logger = logging.getLogger(name or "newsroom")

    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)
    logger.propagate = False

    return logger
