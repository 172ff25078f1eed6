"""Deduplicate and persist the comment and rating carried by one row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ratingest.domain.model import Comment, CommentRecord, Rating
from ratingest.domain.ports.persistence import ResourceUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from ratingest.domain.model import CanonicalRecord, Resource
    from ratingest.domain.ports.unit_of_work import ImportRepositories

    from .log import ImportLog
    from .rows import NormalizedRow


@dataclass(frozen=True, slots=True)
class RowWriteResult:
    resource: Resource | None = None
    comment_id: int | None = None
    rating_id: int | None = None
    duplicate: bool = False

    @property
    def wrote_anything(self) -> bool:
        return self.comment_id is not None or self.rating_id is not None


def find_duplicate(comments: Iterable[Comment], *, created: datetime, text: str) -> Comment | None:
    """Return the first comment with the same creation time and text."""

    for comment in comments:
        if comment.created == created and comment.comment == text:
            return comment
    return None


def write_row(
    repositories: ImportRepositories,
    record: CanonicalRecord,
    row: NormalizedRow,
    *,
    user_id: int | None,
    import_log: ImportLog,
) -> RowWriteResult:
    """Insert at most one comment and at most one rating for ``row``.

    A comment identical to a stored one (same timestamp and text) is skipped, and so is
    the row's rating. Ratings have no duplicate check of their own.
    """

    record_id = record.unique_id
    try:
        resource = repositories.resources.find_or_create(record)
    except ResourceUnavailableError:
        import_log.write(f"Record {record_id} not found when trying to create a resource entry")
        return RowWriteResult()

    duplicate = False
    comment_id: int | None = None
    if row.comment:
        existing = find_duplicate(
            repositories.comments.for_resource(resource),
            created=row.timestamp,
            text=row.comment,
        )
        if existing is not None:
            import_log.write(f"Comment on row {row.row_number} for {record_id} already exists")
            duplicate = True
        else:
            comment = Comment(
                resource=resource,
                comment=row.comment,
                created=row.timestamp,
                user_id=user_id,
            )
            comment_id = repositories.comments.add(comment)
            repositories.comment_records.add(CommentRecord(record_id=record_id, comment=comment))
            import_log.write(
                f"Added comment {comment_id} for record {record_id} (row {row.row_number})"
            )

    rating_id: int | None = None
    if row.rating and not duplicate:
        rating_id = repositories.ratings.add(
            Rating(resource=resource, rating=row.rating, created=row.timestamp)
        )
        import_log.write(f"Added rating {rating_id} for record {record_id} (row {row.row_number})")

    return RowWriteResult(
        resource=resource,
        comment_id=comment_id,
        rating_id=rating_id,
        duplicate=duplicate,
    )
