"""
Logging setup for the indicator library.

The library itself only attaches a NullHandler to the "barflow" logger.
Applications call setup_logger() to get colored console output and,
optionally, a dated log file.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = "barflow"


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        # Color a copy so other handlers (file) still see the plain record
        colored = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored.levelname = f"{color}{record.levelname}{Colors.RESET}"
        colored.msg = f"{color}{record.getMessage()}{Colors.RESET}"
        colored.args = None
        return super().format(colored)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the library logger or one of its children.

    Args:
        name: Child name ("factory" -> "barflow.factory"). Names already
            under "barflow." are used as-is, so module __name__ works too.
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def setup_logger(
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the "barflow" logger with console (and optional file) output.

    Calling it again replaces the handlers it installed before.

    Args:
        log_level: Level name; defaults to the configured BARFLOW_LOG_LEVEL.
        log_dir: Directory for barflow_YYYYMMDD.log; defaults to the
            configured BARFLOW_LOG_DIR (console only when unset).

    Returns:
        The configured "barflow" logger.
    """
    from barflow.config import get_config

    log_config = get_config().log
    level_name = (log_level or log_config.level).upper()
    directory = log_dir if log_dir is not None else log_config.log_dir

    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ValueError(
            f"Unknown log level '{level_name}'\n"
            f"\n"
            f"Fix: setup_logger(log_level='INFO')"
        )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler with colors
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(ColoredFormatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S"
    ))
    logger.addHandler(console_handler)

    # File handler (plain text, no colors)
    if directory:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        log_file = path / f"barflow_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)

    return logger
