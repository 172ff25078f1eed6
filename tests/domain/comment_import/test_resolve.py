from __future__ import annotations

from ratingest.domain.comment_import import (
    ByIdentifier,
    ByIndexedField,
    RecordResolver,
    compose_record_id,
    index_request,
    strategies_from_fields,
)
from tests.helpers.comment_import import FakeRecordIndex, make_record


def _resolver(index: FakeRecordIndex) -> RecordResolver:
    return RecordResolver(loader=index, searcher=index)


def test_compose_record_id_does_not_double_prefix() -> None:
    assert compose_record_id("src", "123") == "src.123"
    assert compose_record_id("src", "src.123") == "src.123"
    assert compose_record_id("src", "other.123") == "src.other.123"


def test_strategies_from_fields_keeps_order() -> None:
    strategies = strategies_from_fields(["isbn", " id ", "", "ctrlnum"])

    assert strategies == (ByIndexedField("isbn"), ByIdentifier(), ByIndexedField("ctrlnum"))


def test_strategies_default_to_direct_load() -> None:
    assert strategies_from_fields([""]) == (ByIdentifier(),)


def test_index_request_escapes_quotes_and_disables_deduplication() -> None:
    lookfor, filters = index_request("isbn", 'a"b', "src")

    assert lookfor == 'isbn:"a\\"b"'
    assert filters == ('source_str_mv:"src"', "finna.deduplication:0")


def test_resolve_by_identifier_with_and_without_prefix() -> None:
    record = make_record("src.123")
    index = FakeRecordIndex([record])
    resolver = _resolver(index)

    assert resolver.resolve("src", "123") is record
    assert resolver.resolve("src", "src.123") is record
    assert index.loads == ["src.123", "src.123"]


def test_missing_record_placeholder_is_not_a_match() -> None:
    index = FakeRecordIndex()

    assert _resolver(index).resolve("src", "404") is None


def test_falls_through_to_indexed_field() -> None:
    record = make_record("src.abc")
    index = FakeRecordIndex(searches={'isbn:"978-1"': [record, make_record("src.other")]})

    found = _resolver(index).resolve(
        "src",
        "978-1",
        (ByIdentifier(), ByIndexedField("isbn")),
    )

    assert found is record
    assert index.loads == ["src.978-1"]
    assert index.queries == [('isbn:"978-1"', ('source_str_mv:"src"', "finna.deduplication:0"))]


def test_first_matching_strategy_wins() -> None:
    direct = make_record("src.1")
    index = FakeRecordIndex([direct], searches={'isbn:"1"': [make_record("src.2")]})

    found = _resolver(index).resolve("src", "1", (ByIdentifier(), ByIndexedField("isbn")))

    assert found is direct
    assert index.queries == []


def test_no_strategy_matches() -> None:
    index = FakeRecordIndex()

    found = _resolver(index).resolve("src", "1", (ByIndexedField("isbn"), ByIndexedField("issn")))

    assert found is None
    assert [query for query, _ in index.queries] == ['isbn:"1"', 'issn:"1"']
