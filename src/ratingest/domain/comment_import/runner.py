"""Run driver for comment and rating imports.

Rows are read, resolved and written strictly one at a time. Each row's writes are
committed before the next row is read, so an abort leaves earlier rows in place and
writes nothing further.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Final

from .delimited import DelimitedDialect, read_records
from .errors import (
    FatalImportError,
    ImportFileError,
    ImportLogError,
    InvalidRatingError,
)
from .resolve import DEFAULT_STRATEGIES, compose_record_id
from .rows import ColumnLayout, default_timestamp, normalize_row
from .write import write_row

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from pathlib import Path

    from ratingest.domain.ports.unit_of_work import ImportUnitOfWork

    from .log import ImportLog
    from .resolve import RecordResolver, ResolutionStrategy
    from .rows import NormalizedRow

PROGRESS_INTERVAL: Final[int] = 1000


@dataclass(frozen=True, slots=True)
class ImportRequest:
    """Parameters of one import run."""

    source_id: str
    path: Path
    default_date: date | None = None
    user_id: int | None = None
    strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES
    rating_multiplier: float = 1.0
    layout: ColumnLayout = field(default_factory=ColumnLayout)
    dialect: DelimitedDialect = field(default_factory=DelimitedDialect)


@dataclass(slots=True)
class ImportSummary:
    rows: int = 0
    comments: int = 0
    ratings: int = 0
    skipped: int = 0

    def describe(self) -> str:
        return (
            f"Import completed with {self.rows} rows processed; "
            f"{self.comments} comments and {self.ratings} ratings imported"
        )


@dataclass(slots=True)
class ImportRunContext:
    """Mutable state threaded through the row loop."""

    request: ImportRequest
    resolver: RecordResolver
    import_log: ImportLog
    default_timestamp: datetime
    summary: ImportSummary = field(default_factory=ImportSummary)


def import_comments(
    request: ImportRequest,
    *,
    resolver: RecordResolver,
    unit_of_work_factory: Callable[[], ImportUnitOfWork],
    import_log: ImportLog,
    today: Callable[[], date] = date.today,
) -> ImportSummary:
    """Import comments and ratings from ``request.path``.

    Raises a ``FatalImportError`` subclass (after logging it) when the run has to stop;
    skipped rows are logged and counted.
    """

    try:
        request.layout.validate()
    except FatalImportError as exc:
        import_log.write(str(exc), screen=True)
        raise

    context = ImportRunContext(
        request=request,
        resolver=resolver,
        import_log=import_log,
        default_timestamp=default_timestamp(request.default_date, today=today),
    )
    import_log.write(f"Started import of {request.path}", screen=True)
    import_log.write(f"Default date is {context.default_timestamp:%Y-%m-%d}", screen=True)

    try:
        # undecodable bytes become U+FFFD instead of ending the run
        handle = request.path.open(encoding="utf-8", errors="replace", newline="")
    except OSError as exc:
        import_log.write("Could not open import file for reading", screen=True)
        raise ImportFileError(f"Could not open {request.path} for reading") from exc

    with handle, unit_of_work_factory() as uow:
        try:
            for fields in read_records(handle, request.dialect):
                _process_record(context, uow, fields)
        except ImportLogError:
            raise
        except FatalImportError as exc:
            import_log.write(str(exc), screen=True)
            raise

    import_log.write(context.summary.describe(), screen=True)
    return context.summary


def _process_record(
    context: ImportRunContext,
    uow: ImportUnitOfWork,
    fields: Sequence[str],
) -> None:
    summary = context.summary
    summary.rows += 1
    row_number = summary.rows
    try:
        row = normalize_row(
            fields,
            layout=context.request.layout,
            row_number=row_number,
            default=context.default_timestamp,
            rating_multiplier=context.request.rating_multiplier,
        )
    except InvalidRatingError as exc:
        context.import_log.write(f"Invalid rating '{exc.value}' on row {row_number}", screen=True)
        summary.skipped += 1
    else:
        if row.date_error is not None:
            context.import_log.write(str(row.date_error), screen=True)
        _reconcile_row(context, uow, row)

    if row_number % PROGRESS_INTERVAL == 0:
        context.import_log.write(f"{row_number} rows processed", screen=True)


def _reconcile_row(context: ImportRunContext, uow: ImportUnitOfWork, row: NormalizedRow) -> None:
    request = context.request
    summary = context.summary

    if row.raw_id is None:
        context.import_log.write(f"Row {row.row_number} has no record id")
        summary.skipped += 1
        return

    record = context.resolver.resolve(request.source_id, row.raw_id, request.strategies)
    if record is None:
        record_id = compose_record_id(request.source_id, row.raw_id)
        context.import_log.write(f"Record {row.raw_id} ({record_id}) not found")
        summary.skipped += 1
        return

    result = write_row(
        uow.repositories,
        record,
        row,
        user_id=request.user_id,
        import_log=context.import_log,
    )
    uow.commit()

    if result.comment_id is not None:
        summary.comments += 1
    if result.rating_id is not None:
        summary.ratings += 1
    if not result.wrote_anything:
        summary.skipped += 1
