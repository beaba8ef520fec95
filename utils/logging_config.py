# utils/logging_config.py
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_log_level(level=None):
    """Resolve the log level from the argument or LOG_LEVEL, defaulting to INFO."""
    name = (level or os.getenv("LOG_LEVEL", "INFO")).strip().upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        logging.getLogger(__name__).warning(f"Invalid LOG_LEVEL {name}, using INFO")
        return logging.INFO
    return resolved


def setup_logging(level=None):
    """Configure root logging for the rule runner."""
    root = logging.getLogger()

    # Remove existing handlers so repeated calls don't duplicate output
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(_get_log_level(level))

    return root
