"""
Logging infrastructure.

Modules log through ``logging.getLogger(__name__)``; the API process
configures the root logger once at import time.
"""
import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root configuration for the API process; library loggers propagate to it."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
