from __future__ import annotations

from datetime import datetime
from typing import cast

from ratingest.domain.comment_import import write_row
from tests.helpers.comment_import import (
    FakeCommentRecordRepository,
    FakeCommentRepository,
    FakeImportLog,
    FakeRatingRepository,
    make_record,
    make_repositories,
    make_row,
)


def test_writes_comment_link_and_rating() -> None:
    repositories = make_repositories()
    import_log = FakeImportLog()
    record = make_record("src.1")

    result = write_row(
        repositories,
        record,
        make_row(comment="Lovely", rating=80),
        user_id=7,
        import_log=import_log,  # type: ignore[arg-type]
    )

    comments = cast(FakeCommentRepository, repositories.comments).items
    links = cast(FakeCommentRecordRepository, repositories.comment_records).items
    ratings = cast(FakeRatingRepository, repositories.ratings).items
    assert result.comment_id == 1
    assert result.rating_id == 1
    assert comments[0].comment == "Lovely"
    assert comments[0].user_id == 7
    assert links[0].record_id == "src.1"
    assert links[0].comment is comments[0]
    assert ratings[0].rating == 80
    assert ratings[0].resource is comments[0].resource
    assert import_log.messages == [
        "Added comment 1 for record src.1 (row 1)",
        "Added rating 1 for record src.1 (row 1)",
    ]


def test_duplicate_comment_suppresses_rating() -> None:
    repositories = make_repositories()
    import_log = FakeImportLog()
    record = make_record("src.1")
    stamp = datetime(2024, 1, 1, 10, 0, 0)

    write_row(
        repositories,
        record,
        make_row(timestamp=stamp, comment="Same", rating=None),
        user_id=None,
        import_log=import_log,  # type: ignore[arg-type]
    )
    result = write_row(
        repositories,
        record,
        make_row(row_number=2, timestamp=stamp, comment="Same", rating=90),
        user_id=None,
        import_log=import_log,  # type: ignore[arg-type]
    )

    assert result.duplicate
    assert not result.wrote_anything
    assert len(cast(FakeCommentRepository, repositories.comments).items) == 1
    assert cast(FakeRatingRepository, repositories.ratings).items == []
    assert import_log.messages[-1] == "Comment on row 2 for src.1 already exists"


def test_same_text_at_other_time_is_not_duplicate() -> None:
    repositories = make_repositories()
    import_log = FakeImportLog()
    record = make_record("src.1")

    for number in (1, 2):
        write_row(
            repositories,
            record,
            make_row(number, timestamp=datetime(2024, 1, 1, 0, 0, number), comment="Same"),
            user_id=None,
            import_log=import_log,  # type: ignore[arg-type]
        )

    assert len(cast(FakeCommentRepository, repositories.comments).items) == 2


def test_ratings_are_not_deduplicated() -> None:
    repositories = make_repositories()
    import_log = FakeImportLog()
    record = make_record("src.1")

    for _ in range(2):
        write_row(
            repositories,
            record,
            make_row(comment=None, rating=40),
            user_id=None,
            import_log=import_log,  # type: ignore[arg-type]
        )

    assert len(cast(FakeRatingRepository, repositories.ratings).items) == 2
    assert cast(FakeCommentRepository, repositories.comments).items == []


def test_zero_rating_is_never_stored() -> None:
    repositories = make_repositories()

    result = write_row(
        repositories,
        make_record("src.1"),
        make_row(comment=None, rating=0),
        user_id=None,
        import_log=FakeImportLog(),  # type: ignore[arg-type]
    )

    assert result.rating_id is None
    assert cast(FakeRatingRepository, repositories.ratings).items == []


def test_unavailable_resource_skips_row() -> None:
    repositories = make_repositories(unavailable=["src.1"])
    import_log = FakeImportLog()

    result = write_row(
        repositories,
        make_record("src.1"),
        make_row(comment="Text", rating=50),
        user_id=None,
        import_log=import_log,  # type: ignore[arg-type]
    )

    assert result.resource is None
    assert not result.wrote_anything
    assert import_log.messages == [
        "Record src.1 not found when trying to create a resource entry"
    ]
