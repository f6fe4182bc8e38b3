"""Root logger setup for the API process."""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str | int = logging.INFO, format_string: str = LOG_FORMAT) -> None:
    """Configure the root logger once.

    Args:
        level: Logging level name or number (default: INFO)
        format_string: Log message format
    """
    global _configured

    if _configured:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=LOG_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    _configured = True
