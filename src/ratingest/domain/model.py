"""Domain entities for imported comments and ratings.

``Resource``, ``Comment``, ``CommentRecord`` and ``Rating`` are plain dataclasses that the
SQLAlchemy adapter maps imperatively. Records coming from the index are represented by the
``CanonicalRecord`` protocol; the importer never owns or stores them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

DEFAULT_BACKEND: Final[str] = "Solr"


@runtime_checkable
class CanonicalRecord(Protocol):
    """A record resolved from the index; only its unique id matters to the importer."""

    @property
    def unique_id(self) -> str: ...

    @property
    def backend(self) -> str: ...

    @property
    def title(self) -> str: ...


@dataclass(frozen=True, slots=True)
class IndexRecord:
    unique_id: str
    backend: str = DEFAULT_BACKEND
    title: str = ""
    data_sources: tuple[str, ...] = ()
    fields: Mapping[str, object] = field(default_factory=dict[str, object], repr=False)


@dataclass(frozen=True, slots=True)
class MissingRecord:
    """Placeholder returned by non-strict loads when an identifier is unknown."""

    unique_id: str = ""
    backend: str = DEFAULT_BACKEND
    title: str = ""


MISSING_RECORD: Final[MissingRecord] = MissingRecord()


@dataclass(eq=False, kw_only=True)
class Resource:
    """Storage-side handle for a record that comments and ratings attach to."""

    record_id: str
    source: str = DEFAULT_BACKEND
    title: str = ""
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class Comment:
    resource: Resource
    comment: str
    created: datetime
    user_id: int | None = None
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class CommentRecord:
    """Links a comment to the record id it was imported for."""

    record_id: str
    comment: Comment
    id: int | None = None


@dataclass(eq=False, kw_only=True)
class Rating:
    resource: Resource
    rating: int
    created: datetime
    user_id: int | None = None
    id: int | None = None
