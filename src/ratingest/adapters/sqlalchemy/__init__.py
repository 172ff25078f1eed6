"""SQLAlchemy adapter package for ratingest."""

from __future__ import annotations

from .mappings import (
    comments_record_table,
    comments_table,
    create_all_tables,
    mapper_registry,
    ratings_table,
    resource_table,
    start_mappers,
)
from .repositories import (
    SqlAlchemyCommentRecordRepository,
    SqlAlchemyCommentRepository,
    SqlAlchemyRatingRepository,
    SqlAlchemyResourceRepository,
)
from .unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCommentRecordRepository",
    "SqlAlchemyCommentRepository",
    "SqlAlchemyImportUnitOfWork",
    "SqlAlchemyRatingRepository",
    "SqlAlchemyResourceRepository",
    "StartupError",
    "comments_record_table",
    "comments_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "ratings_table",
    "resource_table",
    "shutdown",
    "start_mappers",
    "startup",
]
