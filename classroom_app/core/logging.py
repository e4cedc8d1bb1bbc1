# classroom_app/core/logging.py
"""Logging configuration."""
import logging
import sys

from .config import settings

def setup_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

logger = logging.getLogger(settings.app_name)
