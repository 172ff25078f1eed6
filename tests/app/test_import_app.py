from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from ratingest import app as app_module
from ratingest.adapters.solr import SolrClient
from ratingest.config import IndexConfig
from ratingest.domain.comment_import import ImportRequest
from tests.helpers.comment_import import (
    FakeImportUnitOfWork,
    FakeRecordIndex,
    make_record,
    write_lines,
)

if TYPE_CHECKING:
    from pathlib import Path


def test_import_with_injected_collaborators(tmp_path: Path) -> None:
    path = write_lines(tmp_path / "comments.csv", ["1,\\N,Hello,3", "2,\\N,Missing,"])
    log_path = tmp_path / "import.log"
    uow = FakeImportUnitOfWork()

    summary = app_module.import_comments_from_file(
        ImportRequest(source_id="src", path=path, rating_multiplier=20.0),
        log_path=log_path,
        record_index=FakeRecordIndex([make_record("src.1")]),
        unit_of_work_factory=lambda: uow,
    )

    assert (summary.rows, summary.comments, summary.ratings) == (2, 1, 1)
    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert lines[-1].endswith(
        "Import completed with 2 rows processed; 1 comments and 1 ratings imported"
    )
    assert any(line.endswith("Record 2 (src.2) not found") for line in lines)


def test_import_builds_solr_index_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    monkeypatch.setenv("RATINGEST_INDEX_URL", "https://index.example.org/solr")
    monkeypatch.setenv("RATINGEST_INDEX_DEDUPLICATION", "1")
    queries: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        queries.append(request.url.params["q"])
        return httpx.Response(
            200,
            json={"response": {"numFound": 1, "start": 0, "docs": [{"id": "src.1"}]}},
        )

    def client_factory(config: IndexConfig) -> SolrClient:
        http_client = httpx.Client(
            base_url=config.base_url,
            transport=httpx.MockTransport(handler),
        )
        return SolrClient(config, client=http_client)

    monkeypatch.setattr(app_module, "SolrClient", client_factory)
    path = write_lines(tmp_path / "comments.csv", ["1,\\N,Via Solr,"])
    uow = FakeImportUnitOfWork()

    summary = app_module.import_comments_from_file(
        ImportRequest(source_id="src", path=path),
        log_path=tmp_path / "import.log",
        unit_of_work_factory=lambda: uow,
    )

    assert summary.comments == 1
    assert queries == ['id:"src.1"']
