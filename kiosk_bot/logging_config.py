"""
Logging configuration for the kiosk bot.

Usage:
    from kiosk_bot.logging_config import setup_logging
    setup_logging()  # Call once at startup, before the first transcript

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)

Log records go to stderr. The console driver prints the kiosk's side of the
conversation on stdout, and the two must not interleave.

What customers say is only logged at DEBUG. INFO carries state transitions,
match results and cart changes.
"""
import logging
import os
import sys

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Third-party loggers that are only useful when debugging
NOISY_LOGGERS = [
    "dotenv.main",  # one warning per unparsable .env line
]


def setup_logging(level: str = None) -> str:
    """
    Configure logging for the kiosk.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.

    Returns:
        The level name actually applied
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    if level not in VALID_LEVELS:
        level = "INFO"

    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    logging.getLogger("kiosk_bot").setLevel(numeric_level)

    noisy_level = logging.NOTSET if level == "DEBUG" else logging.ERROR
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level", level)
    return level
