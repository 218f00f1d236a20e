"""
Logging setup for the engine.

Modules log through ``logging.getLogger(__name__)``; this only wires the
root handler once, at application start.
"""

import logging
import sys
from typing import Optional

from talent_pipeline.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a console handler to the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR). Defaults to
            ``settings.LOG_LEVEL``.
    """
    global _configured

    logger = logging.getLogger("talent_pipeline")
    logger.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper()))

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    _configured = True
