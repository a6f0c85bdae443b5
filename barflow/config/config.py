"""
Configuration management for the indicator library.

Indicators take their parameters as constructor arguments; the only settings
loaded from the environment are the logging ones.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    log_dir: Optional[str] = None  # None = console only


class Config:
    """
    Central configuration manager.

    Loads .env files (later files override earlier) and exposes typed
    sub-configs.
    """

    def __init__(self, env_file: str = ".env"):
        for env_name in [".env", env_file]:
            env_path = Path(env_name)
            if env_path.exists():
                load_dotenv(env_path, override=True)

        self.log = self._load_log_config()

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("BARFLOW_LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("BARFLOW_LOG_DIR") or None,
        )


_config: Optional[Config] = None


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config(env_file)
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None
