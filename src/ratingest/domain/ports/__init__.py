"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    CommentRecordRepository,
    CommentRepository,
    RatingRepository,
    ResourceRepository,
    ResourceUnavailableError,
)
from .resolution import (
    DEFAULT_SEARCH_BACKEND,
    RecordIndex,
    RecordLoader,
    RecordMissingError,
    RecordSearcher,
    SearchResults,
)
from .unit_of_work import ImportRepositories, ImportUnitOfWork

__all__ = [
    "DEFAULT_SEARCH_BACKEND",
    "CommentRecordRepository",
    "CommentRepository",
    "ImportRepositories",
    "ImportUnitOfWork",
    "RatingRepository",
    "RecordIndex",
    "RecordLoader",
    "RecordMissingError",
    "RecordSearcher",
    "ResourceRepository",
    "ResourceUnavailableError",
    "SearchResults",
]
