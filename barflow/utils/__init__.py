"""
Utility modules.
"""

from .logger import get_logger, setup_logger, ColoredFormatter, LOGGER_NAME
from .helpers import require_min_int, safe_float

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "ColoredFormatter",
    "LOGGER_NAME",
    # Validation / conversion helpers
    "require_min_int",
    "safe_float",
]
