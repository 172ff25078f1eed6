"""Transaction boundary around the writes of an import run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from ratingest.domain.ports.persistence import (
        CommentRecordRepository,
        CommentRepository,
        RatingRepository,
        ResourceRepository,
    )


@dataclass(slots=True)
class ImportRepositories:
    """Repositories a row's writes go through."""

    resources: ResourceRepository
    comments: CommentRepository
    comment_records: CommentRecordRepository
    ratings: RatingRepository


@runtime_checkable
class ImportUnitOfWork(Protocol):
    """Session scope of one import run.

    The run commits after every row, so a later abort keeps the rows already written.
    Leaving the scope with an exception rolls back the uncommitted row.
    """

    @property
    def repositories(self) -> ImportRepositories: ...

    def __enter__(self) -> ImportUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
