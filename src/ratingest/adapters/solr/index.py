"""Record loading and searching against a Solr index."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from ratingest.domain.model import MISSING_RECORD, IndexRecord
from ratingest.domain.ports.resolution import (
    DEFAULT_SEARCH_BACKEND,
    RecordMissingError,
    SearchResults,
)

from .client import SolrAPIError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ratingest.domain.model import CanonicalRecord

    from .client import SolrClient
    from .schema import SolrDocument

log = getLogger(__name__)

DEDUPLICATION_FILTER_PREFIX: Final[str] = "finna.deduplication:"
MERGED_RECORDS_FILTER: Final[str] = "-merged_boolean:true"
MERGED_CHILDREN_FILTER: Final[str] = "-merged_child_boolean:true"
DEFAULT_SEARCH_ROWS: Final[int] = 20


def _escape_phrase(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _first_string(value: object) -> str | None:
    if isinstance(value, str):
        return value or None
    if isinstance(value, list):
        for item in value:
            if isinstance(item, str) and item:
                return item
    return None


class SolrRecordIndex:
    """Resolve records by id or by query, mapping Solr documents to ``IndexRecord``."""

    def __init__(
        self,
        client: SolrClient,
        *,
        deduplication: bool = True,
        source_field: str = "source_str_mv",
        search_rows: int = DEFAULT_SEARCH_ROWS,
    ) -> None:
        self._client = client
        self._deduplication = deduplication
        self._source_field = source_field
        self._search_rows = search_rows

    def load(
        self,
        record_id: str,
        *,
        backend: str = DEFAULT_SEARCH_BACKEND,
        tolerate_missing: bool = True,
    ) -> CanonicalRecord:
        response = self._client.select(f'id:"{_escape_phrase(record_id)}"', rows=1)
        docs = response.response.docs
        if docs:
            return self.to_record(docs[0], backend=backend)
        log.debug("Record %s is not in the index", record_id)
        if tolerate_missing:
            return MISSING_RECORD
        raise RecordMissingError(f"Record {record_id} does not exist")

    def search(self, lookfor: str, *, filters: Sequence[str] = ()) -> SearchResults:
        response = self._client.select(
            lookfor,
            filters=self.translate_filters(filters),
            rows=self._search_rows,
        )
        body = response.response
        return SearchResults(
            total=body.num_found,
            records=tuple(self.to_record(doc) for doc in body.docs),
        )

    def translate_filters(self, filters: Sequence[str]) -> tuple[str, ...]:
        """Replace the deduplication pseudo-filter with the matching Solr filter."""

        translated: list[str] = []
        deduplication = self._deduplication
        for value in filters:
            if value.startswith(DEDUPLICATION_FILTER_PREFIX):
                deduplication = value.removeprefix(DEDUPLICATION_FILTER_PREFIX).strip() != "0"
                continue
            translated.append(value)
        translated.append(MERGED_CHILDREN_FILTER if deduplication else MERGED_RECORDS_FILTER)
        return tuple(translated)

    def to_record(self, doc: SolrDocument, *, backend: str = DEFAULT_SEARCH_BACKEND) -> IndexRecord:
        unique_id = doc.get("id")
        if not isinstance(unique_id, str) or not unique_id:
            raise SolrAPIError("Solr document without an id")
        sources = doc.get(self._source_field)
        if isinstance(sources, str):
            data_sources: tuple[str, ...] = (sources,)
        elif isinstance(sources, list):
            data_sources = tuple(item for item in sources if isinstance(item, str))
        else:
            data_sources = ()
        title = _first_string(doc.get("title")) or _first_string(doc.get("title_short")) or ""
        return IndexRecord(
            unique_id=unique_id,
            backend=backend,
            title=title,
            data_sources=data_sources,
            fields=doc,
        )

