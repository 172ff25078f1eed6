from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx
import pytest

from ratingest.adapters.solr import SolrAPIError, SolrClient, SolrRecordIndex
from ratingest.adapters.solr.schema import SolrSelectResponse
from ratingest.config import IndexConfig
from ratingest.domain.model import MISSING_RECORD, IndexRecord
from ratingest.domain.ports.resolution import RecordMissingError

if TYPE_CHECKING:
    from collections.abc import Callable


CONFIG = IndexConfig(base_url="https://index.example.org/solr", core="biblio")


def _payload(docs: list[dict[str, object]], *, num_found: int | None = None) -> dict[str, object]:
    return {
        "responseHeader": {"status": 0, "QTime": 1},
        "response": {
            "numFound": len(docs) if num_found is None else num_found,
            "start": 0,
            "docs": docs,
        },
    }


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
) -> SolrClient:
    http_client = httpx.Client(
        base_url=CONFIG.base_url,
        transport=httpx.MockTransport(handler),
    )
    return SolrClient(CONFIG, client=http_client)


def test_load_returns_index_record() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=_payload(
                [
                    {
                        "id": "src.1",
                        "source_str_mv": ["src", "other"],
                        "title_short": "Short title",
                    }
                ]
            ),
        )

    record = SolrRecordIndex(_client(handler)).load("src.1")

    assert isinstance(record, IndexRecord)
    assert record.unique_id == "src.1"
    assert record.data_sources == ("src", "other")
    assert record.title == "Short title"
    assert requests[0].url.path == "/solr/biblio/select"
    assert requests[0].url.params["q"] == 'id:"src.1"'
    assert requests[0].url.params["rows"] == "1"
    assert requests[0].url.params["wt"] == "json"
    assert "fq" not in requests[0].url.params


def test_load_missing_record() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_payload([]))

    index = SolrRecordIndex(_client(handler))

    assert index.load("src.404") is MISSING_RECORD
    with pytest.raises(RecordMissingError):
        index.load("src.404", tolerate_missing=False)


def test_search_translates_deduplication_filter() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json=_payload([{"id": "src.7", "title": "Found"}], num_found=3),
        )

    results = SolrRecordIndex(_client(handler)).search(
        'isbn:"978-1"',
        filters=('source_str_mv:"src"', "finna.deduplication:0"),
    )

    assert results.total == 3
    assert [record.unique_id for record in results.records] == ["src.7"]
    assert requests[0].url.params["q"] == 'isbn:"978-1"'
    assert requests[0].url.params.get_list("fq") == [
        'source_str_mv:"src"',
        "-merged_boolean:true",
    ]
    assert requests[0].url.params["rows"] == "20"


@pytest.mark.parametrize(
    ("deduplication", "expected"),
    [(True, "-merged_child_boolean:true"), (False, "-merged_boolean:true")],
)
def test_search_without_pseudo_filter_uses_configured_default(
    deduplication: bool,  # noqa: FBT001
    expected: str,
) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_payload([]))

    SolrRecordIndex(_client(handler), deduplication=deduplication).search("title:test")

    assert requests[0].url.params.get_list("fq") == [expected]


def test_http_errors_raise_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    with pytest.raises(SolrAPIError) as exc:
        SolrRecordIndex(_client(handler)).load("src.1")

    assert exc.value.status_code == 503


def test_unexpected_payload_raises_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": {"msg": "bad query"}})

    with pytest.raises(SolrAPIError):
        SolrRecordIndex(_client(handler)).search("bad")


def test_transport_errors_raise_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(SolrAPIError):
        SolrRecordIndex(_client(handler)).load("src.1")


def test_unmodeled_keys_are_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    payload = _payload([])
    payload["nextCursorMark"] = "AoE"

    with caplog.at_level(logging.WARNING, logger="ratingest.adapters.solr.schema"):
        SolrSelectResponse.model_validate(payload)
        SolrSelectResponse.model_validate(payload)

    warnings = [record.getMessage() for record in caplog.records]
    assert warnings == ["Solr SolrSelectResponse: unmodeled keys: nextCursorMark"]
