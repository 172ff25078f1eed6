"""SQLAlchemy unit of work for comment imports.

``startup()`` binds the adapter to one engine per process. Each
``SqlAlchemyImportUnitOfWork`` then opens its own session from that engine and closes
it on exit, rolling back whatever was not committed.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from ratingest.adapters.sqlalchemy.mappings import create_all_tables, start_mappers
from ratingest.adapters.sqlalchemy.repositories import (
    SqlAlchemyCommentRecordRepository,
    SqlAlchemyCommentRepository,
    SqlAlchemyRatingRepository,
    SqlAlchemyResourceRepository,
)
from ratingest.config.storage import get_database_config
from ratingest.domain.ports.unit_of_work import ImportRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Connection, Engine

    from ratingest.config.storage import DatabaseConfig

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the adapter is used before ``startup()`` or configured twice."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    session_factory: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.session_factory = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    def require_session_factory(self) -> sessionmaker[Session]:
        if self.session_factory is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call ratingest.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        return self.session_factory


_STATE = _AdapterState()


def _disable_pysqlite_transactions(dbapi_connection: Any, _record: object) -> None:
    dbapi_connection.isolation_level = None


def _emit_begin(connection: Connection) -> None:
    connection.exec_driver_sql("BEGIN")


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy issue BEGIN itself so the resource SAVEPOINT nests correctly.

    pysqlite defers BEGIN to the first write, so a SAVEPOINT issued before it would
    open (and its RELEASE commit) the outer transaction.
    """

    if engine.dialect.name != "sqlite" or engine.dialect.driver != "pysqlite":
        return
    if not event.contains(engine, "connect", _disable_pysqlite_transactions):
        event.listen(engine, "connect", _disable_pysqlite_transactions)
    if not event.contains(engine, "begin", _emit_begin):
        event.listen(engine, "begin", _emit_begin)


def startup(
    *,
    engine: Engine | None = None,
    database: DatabaseConfig | None = None,
    force: bool = False,
) -> None:
    """Map the domain model and bind the adapter to ``engine`` (or the configured database)."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = database or get_database_config()
        engine = create_engine(config.uri, echo=config.echo, future=True)
        create_schema = config.create_schema
    else:
        create_schema = database.create_schema if database is not None else True

    _enable_sqlite_savepoints(engine)
    start_mappers()
    if create_schema:
        create_all_tables(engine)

    log.debug("SQLAlchemy adapter bound to %s", engine.url)
    _STATE.bind(engine)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


class SqlAlchemyImportUnitOfWork:
    """One session holding the resource, comment, link and rating repositories."""

    def __init__(self) -> None:
        self.session_factory = _STATE.require_session_factory()
        self._session: Session | None = None
        self._repositories: ImportRepositories | None = None

    def __enter__(self) -> SqlAlchemyImportUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work session already initialised")
        session = self.session_factory()
        self._session = session
        self._repositories = ImportRepositories(
            resources=SqlAlchemyResourceRepository(session),
            comments=SqlAlchemyCommentRepository(session),
            comment_records=SqlAlchemyCommentRecordRepository(session),
            ratings=SqlAlchemyRatingRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> ImportRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session


if TYPE_CHECKING:
    from ratingest.domain.ports.unit_of_work import ImportUnitOfWork

    _uow_check: ImportUnitOfWork = SqlAlchemyImportUnitOfWork()
