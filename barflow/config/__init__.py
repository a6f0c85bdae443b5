"""
Configuration: indicator defaults and environment-driven logging settings.
"""

from .config import Config, LogConfig, get_config, reset_config
from . import constants

__all__ = [
    "Config",
    "LogConfig",
    "get_config",
    "reset_config",
    "constants",
]
