"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from ratingest.adapters.solr import SolrClient, SolrRecordIndex
from ratingest.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyImportUnitOfWork,
    is_started,
    startup,
)
from ratingest.config import get_index_config
from ratingest.domain.comment_import import (
    ImportLog,
    ImportRequest,
    ImportSummary,
    RecordResolver,
    import_comments,
)
from ratingest.domain.ports.unit_of_work import ImportUnitOfWork

if TYPE_CHECKING:
    from pathlib import Path

    from ratingest.domain.ports.resolution import RecordIndex

UnitOfWorkFactory = Callable[[], ImportUnitOfWork]

log = getLogger(__name__)


def import_comments_from_file(
    request: ImportRequest,
    *,
    log_path: Path,
    verbose: bool = False,
    record_index: RecordIndex | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ImportSummary:
    """Import comments and ratings from ``request.path`` using the configured adapters.

    When ``record_index`` is omitted a Solr index is built from the environment.
    """

    if unit_of_work_factory is None and not is_started():
        startup()
    effective_uow = unit_of_work_factory or SqlAlchemyImportUnitOfWork
    import_log = ImportLog(log_path, verbose=verbose)

    log.info(
        "Starting comment import: source=%s, file=%s, strategies=%s",
        request.source_id,
        request.path,
        request.strategies,
    )

    if record_index is not None:
        summary = _run(request, record_index, effective_uow, import_log)
    else:
        config = get_index_config()
        with SolrClient(config) as client:
            index = SolrRecordIndex(client, deduplication=config.deduplication)
            summary = _run(request, index, effective_uow, import_log)

    log.info(
        f"Finished comment import: rows={summary.rows}, comments={summary.comments}, "
        f"ratings={summary.ratings}, skipped={summary.skipped}"
    )
    return summary


def _run(
    request: ImportRequest,
    index: RecordIndex,
    unit_of_work_factory: UnitOfWorkFactory,
    import_log: ImportLog,
) -> ImportSummary:
    resolver = RecordResolver(loader=index, searcher=index)
    return import_comments(
        request,
        resolver=resolver,
        unit_of_work_factory=unit_of_work_factory,
        import_log=import_log,
    )
