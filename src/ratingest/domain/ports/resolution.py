"""Ports for looking up records in the search index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

from ratingest.domain.model import DEFAULT_BACKEND

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ratingest.domain.model import CanonicalRecord

DEFAULT_SEARCH_BACKEND: Final[str] = DEFAULT_BACKEND


class RecordMissingError(LookupError):
    """Raised by strict loads when the identifier is not in the index."""


@dataclass(frozen=True, slots=True)
class SearchResults:
    """Ranked search hits together with the total hit count reported by the index."""

    total: int
    records: tuple[CanonicalRecord, ...] = ()


@runtime_checkable
class RecordLoader(Protocol):
    """Load a single record by its unique identifier."""

    def load(
        self,
        record_id: str,
        *,
        backend: str = DEFAULT_SEARCH_BACKEND,
        tolerate_missing: bool = True,
    ) -> CanonicalRecord:
        """Return the record, or ``MISSING_RECORD`` when tolerating missing records."""
        ...


@runtime_checkable
class RecordSearcher(Protocol):
    """Run a query with filter queries against the index."""

    def search(self, lookfor: str, *, filters: Sequence[str] = ()) -> SearchResults: ...


@runtime_checkable
class RecordIndex(RecordLoader, RecordSearcher, Protocol):
    """An index that supports both direct loads and searches."""
