"""Tokenizer for the delimited export files the importer reads.

The exports escape delimiters and enclosures with a backslash and mark SQL NULLs as
``\\N``. The standard ``csv`` module drops escape characters while reading, which would
turn ``\\N`` into ``N``, so records are split here instead: inside an enclosure the escape
character only stops the next character from closing the field, and both characters are
kept verbatim. Comment text is unescaped later by ``rows.unescape_comment``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ImportConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

_LINE_ENDINGS = ("\r\n", "\n", "\r")


@dataclass(frozen=True, slots=True)
class DelimitedDialect:
    separator: str = ","
    enclosure: str = '"'
    escape: str = "\\"

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise ImportConfigurationError("Separator must be a single character")
        if len(self.enclosure) != 1:
            raise ImportConfigurationError("Enclosure must be a single character")
        if len(self.escape) > 1:
            raise ImportConfigurationError("Escape must be a single character or empty")
        if self.separator == self.enclosure:
            raise ImportConfigurationError("Separator and enclosure must differ")


def read_records(lines: Iterable[str], dialect: DelimitedDialect) -> Iterator[list[str]]:
    """Yield one list of fields per record.

    ``lines`` should come from a text stream opened with ``newline=""`` so that line
    endings inside enclosed fields survive. An empty line yields ``[""]``.
    """

    tokenizer = _Tokenizer(dialect)
    for line in lines:
        record = tokenizer.feed(line)
        if record is not None:
            yield record
    remainder = tokenizer.finish()
    if remainder is not None:
        yield remainder


def _split_line_ending(line: str) -> tuple[str, str]:
    for ending in _LINE_ENDINGS:
        if line.endswith(ending):
            return line[: -len(ending)], ending
    return line, ""


class _Tokenizer:
    def __init__(self, dialect: DelimitedDialect) -> None:
        self._dialect = dialect
        self._fields: list[str] = []
        self._chars: list[str] = []
        self._enclosed = False
        self._escaped = False
        self._field_start = True
        self._pending = False

    def feed(self, line: str) -> list[str] | None:
        body, ending = _split_line_ending(line)
        separator = self._dialect.separator
        enclosure = self._dialect.enclosure
        escape = self._dialect.escape
        self._pending = True

        index = 0
        length = len(body)
        while index < length:
            char = body[index]
            if self._escaped:
                self._chars.append(char)
                self._escaped = False
            elif self._enclosed:
                if escape and char == escape and escape != enclosure:
                    self._chars.append(char)
                    self._escaped = True
                elif char == enclosure:
                    if index + 1 < length and body[index + 1] == enclosure:
                        self._chars.append(char)
                        index += 1
                    else:
                        self._enclosed = False
                else:
                    self._chars.append(char)
            elif char == separator:
                self._end_field()
            elif char == enclosure and self._field_start:
                self._enclosed = True
                self._field_start = False
            else:
                self._chars.append(char)
                self._field_start = False
            index += 1

        if self._enclosed:
            # Line break belongs to the enclosed field
            self._chars.append(ending)
            self._escaped = False
            return None
        return self._end_record()

    def finish(self) -> list[str] | None:
        if not self._pending:
            return None
        return self._end_record()

    def _end_field(self) -> None:
        self._fields.append("".join(self._chars))
        self._chars = []
        self._field_start = True

    def _end_record(self) -> list[str]:
        self._end_field()
        record = self._fields
        self._fields = []
        self._enclosed = False
        self._escaped = False
        self._pending = False
        return record
