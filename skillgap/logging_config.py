"""
Logging setup for entry points (Streamlit app and scripts).

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whoever owns the process.
"""
import logging
import sys
from typing import Optional

from skillgap.config import config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure root logging with a human-readable console handler.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
            Defaults to ``config.log_level``.
    """
    level_name = (log_level or config.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_skillgap_handler", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    handler._skillgap_handler = True  # type: ignore[attr-defined]

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
