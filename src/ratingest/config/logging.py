"""Process logging for command line runs."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%H:%M:%S"
# HTTP client loggers report every index request at INFO
QUIET_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger once; ``force=True`` replaces existing handlers."""

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=force)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
