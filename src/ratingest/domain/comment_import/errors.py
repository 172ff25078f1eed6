"""Error taxonomy for comment imports.

Fatal errors abort the whole run. Invalid ratings skip the row; invalid dates only
replace the row's timestamp.
"""

from __future__ import annotations


class CommentImportError(RuntimeError):
    """Base class for comment import failures."""


class FatalImportError(CommentImportError):
    """Raised for conditions that abort the run."""


class ImportConfigurationError(FatalImportError):
    """Raised when run parameters are unusable."""


class ColumnConfigurationError(ImportConfigurationError):
    """Raised when the column layout cannot identify records or their content."""


class ImportFileError(FatalImportError):
    """Raised when the input file cannot be opened."""


class ImportLogError(FatalImportError):
    """Raised when the result log cannot be appended to."""


class MalformedRowError(FatalImportError):
    """Raised for a line that has fewer than two fields."""

    def __init__(self, message: str, *, row_number: int, field_count: int) -> None:
        super().__init__(message)
        self.row_number = row_number
        self.field_count = field_count


class InvalidDateError(CommentImportError):
    """Raised when a row's date cannot be parsed.

    The row is still imported with a fallback timestamp.
    """

    def __init__(self, message: str, *, row_number: int, value: str) -> None:
        super().__init__(message)
        self.row_number = row_number
        self.value = value


class InvalidRatingError(CommentImportError):
    """Raised when a normalized rating falls outside 0-100 or is not a number."""

    def __init__(self, message: str, *, value: object) -> None:
        super().__init__(message)
        self.value = value
