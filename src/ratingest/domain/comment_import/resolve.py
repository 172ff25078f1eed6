"""Resolve raw row identifiers to records in the index.

Strategies are tried in the configured order and the first hit wins:

- ``ByIdentifier`` loads ``<source>.<raw id>`` directly, treating a missing-record
  placeholder as no match.
- ``ByIndexedField`` queries ``<field>:"<raw id>"`` restricted to the data source, with
  index-side deduplication switched off so that every source record is addressable.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, TypeAlias

from ratingest.domain.model import MissingRecord
from ratingest.domain.ports.resolution import DEFAULT_SEARCH_BACKEND

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ratingest.domain.model import CanonicalRecord
    from ratingest.domain.ports.resolution import RecordLoader, RecordSearcher

log = getLogger(__name__)

ID_FIELD: Final[str] = "id"
SOURCE_FILTER_FIELD: Final[str] = "source_str_mv"
NO_DEDUPLICATION_FILTER: Final[str] = "finna.deduplication:0"


@dataclass(frozen=True, slots=True)
class ByIdentifier:
    """Direct load by prefixed record identifier."""


@dataclass(frozen=True, slots=True)
class ByIndexedField:
    """Exact match of the raw identifier against an index field."""

    field: str


ResolutionStrategy: TypeAlias = ByIdentifier | ByIndexedField

DEFAULT_STRATEGIES: Final[tuple[ResolutionStrategy, ...]] = (ByIdentifier(),)


def strategies_from_fields(fields: Iterable[str]) -> tuple[ResolutionStrategy, ...]:
    """Map configured field names to strategies, keeping their order.

    The literal field name ``id`` selects a direct load; any other name an index query.
    """

    strategies: list[ResolutionStrategy] = []
    for name in fields:
        field_name = name.strip()
        if not field_name:
            continue
        strategies.append(ByIdentifier() if field_name == ID_FIELD else ByIndexedField(field_name))
    return tuple(strategies) or DEFAULT_STRATEGIES


def compose_record_id(source_id: str, raw_id: str) -> str:
    """Prefix ``raw_id`` with ``<source_id>.`` unless it already carries that prefix."""

    prefix = f"{source_id}."
    if raw_id.startswith(prefix):
        return raw_id
    return prefix + raw_id


def quote_value(value: str) -> str:
    """Wrap ``value`` in double quotes, backslash-escaping embedded quotes."""

    return '"' + value.replace('"', '\\"') + '"'


def index_request(field: str, raw_id: str, source_id: str) -> tuple[str, tuple[str, ...]]:
    """Return the query and filter queries for matching ``raw_id`` in ``field``."""

    lookfor = f"{field}:{quote_value(raw_id)}"
    filters = (
        f"{SOURCE_FILTER_FIELD}:{quote_value(source_id)}",
        NO_DEDUPLICATION_FILTER,
    )
    return lookfor, filters


@dataclass(slots=True)
class RecordResolver:
    loader: RecordLoader
    searcher: RecordSearcher
    backend: str = DEFAULT_SEARCH_BACKEND

    def resolve(
        self,
        source_id: str,
        raw_id: str,
        strategies: Sequence[ResolutionStrategy] = DEFAULT_STRATEGIES,
    ) -> CanonicalRecord | None:
        """Return the first record matched by ``strategies``, or ``None``."""

        record_id = compose_record_id(source_id, raw_id)
        for strategy in strategies:
            match strategy:
                case ByIdentifier():
                    record = self.loader.load(
                        record_id,
                        backend=self.backend,
                        tolerate_missing=True,
                    )
                    if not isinstance(record, MissingRecord):
                        return record
                case ByIndexedField(field=field):
                    lookfor, filters = index_request(field, raw_id, source_id)
                    results = self.searcher.search(lookfor, filters=filters)
                    if results.total > 0 and results.records:
                        return results.records[0]
            log.debug("No match for %s using %s", record_id, strategy)
        return None
