"""Centralized logging configuration for String Tuner.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "string_tuner": logging.INFO,
    "string_tuner.core": logging.INFO,
    # Analysis pipeline, set to DEBUG for a per-frame readout
    "string_tuner.detection": logging.INFO,
    "string_tuner.note_matcher": logging.INFO,
    "string_tuner.feedback": logging.INFO,
    # Collaborators
    "string_tuner.services": logging.INFO,
    "string_tuner.cli": logging.INFO,
    # Libraries/third-party
    "sounddevice": logging.ERROR,
    "soundfile": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'string_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("string_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Package loggers hand records up to "string_tuner", which owns the handler
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name)
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        if module_name in ("string_tuner", "", "sounddevice", "soundfile"):
            logger.addHandler(_console_handler)
            logger.propagate = False
        else:
            logger.propagate = True

    logging.getLogger("string_tuner").debug("Logging configuration complete")
