"""SQLAlchemy mapping metadata for resources, comments and ratings."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from ratingest.domain.model import DEFAULT_BACKEND, Comment, CommentRecord, Rating, Resource

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

RECORD_ID_LENGTH = 255
TITLE_LENGTH = 255
SOURCE_LENGTH = 50

mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

resource_table = Table(
    "resource",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("record_id", String(RECORD_ID_LENGTH), nullable=False, default=""),
    Column("title", String(TITLE_LENGTH), nullable=False, default=""),
    Column("source", String(SOURCE_LENGTH), nullable=False, default=DEFAULT_BACKEND),
    UniqueConstraint("record_id", "source"),
)

comments_table = Table(
    "comments",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=True),
    Column("resource_id", Integer, ForeignKey("resource.id"), nullable=False, index=True),
    Column("comment", Text, nullable=False),
    Column("created", DateTime, nullable=False),
)

comments_record_table = Table(
    "comments_record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("record_id", String(RECORD_ID_LENGTH), nullable=False, index=True),
    Column("comment_id", Integer, ForeignKey("comments.id"), nullable=False),
)

ratings_table = Table(
    "ratings",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=True),
    Column("resource_id", Integer, ForeignKey("resource.id"), nullable=False, index=True),
    Column("rating", Integer, nullable=False),
    Column("created", DateTime, nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Resource, resource_table)

    mapper_registry.map_imperatively(
        Comment,
        comments_table,
        properties={"resource": relationship(Resource)},
    )

    mapper_registry.map_imperatively(
        CommentRecord,
        comments_record_table,
        properties={"comment": relationship(Comment)},
    )

    mapper_registry.map_imperatively(
        Rating,
        ratings_table,
        properties={"resource": relationship(Resource)},
    )

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
