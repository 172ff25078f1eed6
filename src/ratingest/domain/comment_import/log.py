"""Append-only result log for import runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from .errors import ImportLogError

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

log = getLogger(__name__)

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


@dataclass(slots=True)
class ImportLog:
    """Writes one timestamped line per event to ``path``.

    The file is opened in append mode for every write and closed again, so nothing is
    held open across rows. Messages written with ``screen=True``, or every message when
    ``verbose`` is set, are echoed through the module logger.
    """

    path: Path | None
    verbose: bool = False
    clock: Callable[[], datetime] = field(default=datetime.now, repr=False)

    def write(self, message: str, *, screen: bool = False) -> None:
        if self.path is not None:
            line = f"{self.clock().strftime(TIMESTAMP_FORMAT)} {message}\n"
            try:
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(line)
            except OSError as exc:
                raise ImportLogError(f"Failed to write to log file {self.path}") from exc
        if screen or self.verbose:
            log.info(message)
