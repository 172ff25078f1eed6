"""Ports for persisting resources, comments and ratings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ratingest.domain.model import CanonicalRecord, Comment, CommentRecord, Rating, Resource


class ResourceUnavailableError(RuntimeError):
    """Raised when a resource row cannot be found or created for a record."""


@runtime_checkable
class ResourceRepository(Protocol):
    """Persistence contract for resources keyed by record unique id."""

    def find_or_create(self, record: CanonicalRecord) -> Resource: ...


@runtime_checkable
class CommentRepository(Protocol):
    """Persistence contract for comments."""

    def for_resource(self, resource: Resource) -> Sequence[Comment]: ...

    def add(self, comment: Comment) -> int: ...


@runtime_checkable
class CommentRecordRepository(Protocol):
    """Persistence contract for comment-to-record links."""

    def add(self, link: CommentRecord) -> int: ...


@runtime_checkable
class RatingRepository(Protocol):
    """Persistence contract for ratings."""

    def add(self, rating: Rating) -> int: ...
