"""Row parsing and normalisation.

Column numbers are 1-based and 0 disables a column. A row is turned into a
``NormalizedRow`` carrying the raw record id, the creation timestamp, the comment text
and the rating on a 0-100 scale.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Final

from dateutil import parser as date_parser

from .errors import (
    ColumnConfigurationError,
    InvalidDateError,
    InvalidRatingError,
    MalformedRowError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

NULL_DATE_MARKER: Final[str] = "\\N"
MIN_FIELDS: Final[int] = 2
MIN_RATING: Final[int] = 10  # half a star
MAX_RATING: Final[int] = 100

COLUMN_CONFIGURATION_MESSAGE: Final[str] = (
    "ID column and at least one of comment or rating columns is required"
)

_ESCAPED_CHARACTER = re.compile(r"\\([^\\])")


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    id_column: int = 1
    date_column: int = 2
    comment_column: int = 3
    rating_column: int = 4

    def validate(self) -> None:
        columns = (self.id_column, self.date_column, self.comment_column, self.rating_column)
        if any(column < 0 for column in columns):
            raise ColumnConfigurationError("Column numbers must not be negative")
        if not self.id_column or (not self.comment_column and not self.rating_column):
            raise ColumnConfigurationError(COLUMN_CONFIGURATION_MESSAGE)

    @staticmethod
    def value(fields: Sequence[str], column: int) -> str | None:
        """Return the 1-based ``column`` of ``fields``, or ``None`` if disabled or absent."""

        if column <= 0 or column > len(fields):
            return None
        return fields[column - 1]


@dataclass(frozen=True, slots=True)
class NormalizedRow:
    row_number: int
    raw_id: str | None
    timestamp: datetime
    comment: str | None
    rating: int | None
    date_error: InvalidDateError | None = None


def default_timestamp(
    default_date: date | None = None,
    *,
    today: Callable[[], date] = date.today,
) -> datetime:
    """Midnight of ``default_date`` (or of today)."""

    return datetime.combine(default_date or today(), time.min)


def row_timestamp(
    value: str | None,
    *,
    row_number: int,
    default: datetime,
    enabled: bool = True,
) -> datetime:
    """Resolve the creation timestamp for a row.

    Rows carrying the NULL marker get ``default`` plus ``row_number`` seconds, which keeps
    their timestamps distinct and strictly increasing.
    """

    if not enabled:
        return default
    if value == NULL_DATE_MARKER:
        return default + timedelta(seconds=row_number)
    if value is None or not value.strip():
        raise InvalidDateError(
            f"Invalid date '{value or ''}' on row {row_number}",
            row_number=row_number,
            value=value or "",
        )
    try:
        parsed = date_parser.parse(value, default=default)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(
            f"Invalid date '{value}' on row {row_number}",
            row_number=row_number,
            value=value,
        ) from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed.replace(microsecond=0)


def unescape_comment(text: str) -> str:
    r"""Collapse ``\X`` to ``X`` for any single character other than a backslash."""

    return _ESCAPED_CHARACTER.sub(r"\1", text)


def normalize_rating(raw: str | None, multiplier: float = 1.0) -> int | None:
    """Scale a raw rating to 0-100.

    Returns ``None`` for an empty field. Non-zero results below ``MIN_RATING`` are raised
    to it; results outside 0-100 raise ``InvalidRatingError``.
    """

    if raw is None or not raw.strip():
        return None
    try:
        number = float(raw.strip())
    except ValueError as exc:
        raise InvalidRatingError(f"Invalid rating '{raw}'", value=raw) from exc
    scaled = number * multiplier
    if not math.isfinite(scaled):
        raise InvalidRatingError(f"Invalid rating '{raw}'", value=raw)

    rating = _round_half_away_from_zero(scaled)
    if rating < 0 or rating > MAX_RATING:
        raise InvalidRatingError(f"Invalid rating '{rating}'", value=rating)
    if 0 < rating < MIN_RATING:
        rating = MIN_RATING
    return rating


def normalize_row(
    fields: Sequence[str],
    *,
    layout: ColumnLayout,
    row_number: int,
    default: datetime,
    rating_multiplier: float = 1.0,
) -> NormalizedRow:
    """Build a ``NormalizedRow`` from the raw fields of line ``row_number``.

    An unparseable date does not fail the row: the timestamp falls back to ``default``
    plus ``row_number`` seconds and the error is kept on ``date_error``.
    """

    if len(fields) < MIN_FIELDS:
        raise MalformedRowError(
            f"Could not read CSV line {row_number} (only {len(fields)} elements found)",
            row_number=row_number,
            field_count=len(fields),
        )

    raw_id = layout.value(fields, layout.id_column)
    date_error: InvalidDateError | None = None
    try:
        timestamp = row_timestamp(
            layout.value(fields, layout.date_column),
            row_number=row_number,
            default=default,
            enabled=bool(layout.date_column),
        )
    except InvalidDateError as exc:
        # same spacing as the NULL marker so fallback timestamps stay distinct
        timestamp = default + timedelta(seconds=row_number)
        date_error = exc

    comment: str | None = None
    raw_comment = layout.value(fields, layout.comment_column)
    if raw_comment:
        comment = unescape_comment(raw_comment) or None

    rating = normalize_rating(layout.value(fields, layout.rating_column), rating_multiplier)

    return NormalizedRow(
        row_number=row_number,
        raw_id=raw_id if raw_id and raw_id.strip() else None,
        timestamp=timestamp,
        comment=comment,
        rating=rating,
        date_error=date_error,
    )


def _round_half_away_from_zero(value: float) -> int:
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
