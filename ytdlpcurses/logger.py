"""
Logging configuration for ytdlp-curses.

The package logger writes everything to a rotating log file and only warnings
and errors to the console, since the screen belongs to curses most of the time.
"""

import logging
import logging.handlers
from pathlib import Path

from colorama import Fore, Style


PACKAGE_LOGGER = "ytdlpcurses"

# Log file location
LOG_DIR = Path.home() / ".config" / "ytdlp-curses"
LOG_FILE = LOG_DIR / "app.log"


class ColoramaFormatter(logging.Formatter):
    """Formatter that colors the console output by log level."""

    LEVEL_COLORS = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Style.BRIGHT,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, Fore.WHITE)
        message = super().format(record)
        return f"{color}{message}{Style.RESET_ALL}"


def setup_logger(level=logging.INFO, log_file=None):
    """
    Set up and configure the package logger.

    Args:
        level: Level of the file handler (default: logging.INFO)
        log_file: Override for the log file path (default: LOG_FILE)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    # Reconfiguring replaces the handlers installed by a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(ColoramaFormatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    log_file = Path(log_file) if log_file else LOG_FILE
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        # Rotating file handler: max 5MB per file, keep 3 backup files
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)
    except (OSError, PermissionError) as e:
        # If we can't create the file handler, just continue with console logging
        logger.warning(f"Could not set up file logging: {e}")

    return logger


def get_logger(name=PACKAGE_LOGGER):
    """
    Get a logger below the package logger.

    Args:
        name: Logger name, usually the calling module's __name__

    Returns:
        Logger instance
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
