"""
Utility functions for the functional toolkit

Logging setup and cached settings.
"""

import logging
import sys
from functools import lru_cache
from typing import Optional

from models import FunctionalSettings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Setup structured logging for the toolkit"""
    if level is None:
        level = get_settings().log_level

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    return logging.getLogger('functional')


@lru_cache(maxsize=1)
def get_settings() -> FunctionalSettings:
    return FunctionalSettings()


def reset_settings():
    """Forget cached settings so the next get_settings() re-reads the environment"""
    get_settings.cache_clear()
