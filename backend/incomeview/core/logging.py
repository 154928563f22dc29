"""
logging.py — Application-Wide Logging Configuration

Purpose:
- Configure a standardized logging format for the API app and the CLI.
- Uniform formatting: timestamp | level | module | message
"""

import logging

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# Chatty third-party loggers kept at WARNING unless we are debugging
_NOISY_LOGGERS = ("urllib3", "requests")

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL".
            Unknown names fall back to INFO.

    Behavior:
    - Sets logging format globally (stderr, picked up by uvicorn as well).
    - Should be called ONCE, from `incomeview.main` or `incomeview.cli`.
    """
    resolved = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    if resolved > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging initialized with level %s", level)

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger instance to be used in any module.

    In any module:
        from incomeview.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
