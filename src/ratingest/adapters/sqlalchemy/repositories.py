"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ratingest.adapters.sqlalchemy.mappings import (
    TITLE_LENGTH,
    comments_table,
    resource_table,
)
from ratingest.domain.model import Comment, CommentRecord, Rating, Resource
from ratingest.domain.ports.persistence import ResourceUnavailableError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from ratingest.domain.model import CanonicalRecord


def _assigned_id(entity: Resource | Comment | CommentRecord | Rating) -> int:
    if entity.id is None:
        raise RuntimeError(f"{type(entity).__name__} was flushed without an id")
    return entity.id


class SqlAlchemyResourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, record_id: str, source: str) -> Resource | None:
        stmt = (
            select(Resource)
            .where(resource_table.c.record_id == record_id)
            .where(resource_table.c.source == source)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_or_create(self, record: CanonicalRecord) -> Resource:
        record_id = record.unique_id
        if not record_id.strip():
            raise ResourceUnavailableError("Record has no unique id")

        existing = self.get(record_id, record.backend)
        if existing is not None:
            return existing

        resource = Resource(
            record_id=record_id,
            source=record.backend,
            title=record.title[:TITLE_LENGTH],
        )
        try:
            with self.session.begin_nested():
                self.session.add(resource)
        except SQLAlchemyError as exc:
            raise ResourceUnavailableError(f"Could not create resource for {record_id}") from exc
        return resource


class SqlAlchemyCommentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def for_resource(self, resource: Resource) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(comments_table.c.resource_id == resource.id)
            .order_by(comments_table.c.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def add(self, comment: Comment) -> int:
        self.session.add(comment)
        self.session.flush()
        return _assigned_id(comment)


class SqlAlchemyCommentRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, link: CommentRecord) -> int:
        self.session.add(link)
        self.session.flush()
        return _assigned_id(link)


class SqlAlchemyRatingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, rating: Rating) -> int:
        self.session.add(rating)
        self.session.flush()
        return _assigned_id(rating)


if TYPE_CHECKING:
    from ratingest.domain.ports.persistence import (
        CommentRecordRepository,
        CommentRepository,
        RatingRepository,
        ResourceRepository,
    )

    _session_stub = cast("Session", object())
    _resource_repo: ResourceRepository = SqlAlchemyResourceRepository(_session_stub)
    _comment_repo: CommentRepository = SqlAlchemyCommentRepository(_session_stub)
    _link_repo: CommentRecordRepository = SqlAlchemyCommentRecordRepository(_session_stub)
    _rating_repo: RatingRepository = SqlAlchemyRatingRepository(_session_stub)
