"""Bulk import of record comments and ratings from delimited files."""

from __future__ import annotations

from .delimited import DelimitedDialect, read_records
from .errors import (
    ColumnConfigurationError,
    CommentImportError,
    FatalImportError,
    ImportConfigurationError,
    ImportFileError,
    ImportLogError,
    InvalidDateError,
    InvalidRatingError,
    MalformedRowError,
)
from .log import ImportLog
from .resolve import (
    DEFAULT_STRATEGIES,
    ByIdentifier,
    ByIndexedField,
    RecordResolver,
    ResolutionStrategy,
    compose_record_id,
    index_request,
    strategies_from_fields,
)
from .rows import ColumnLayout, NormalizedRow, normalize_rating, normalize_row, unescape_comment
from .runner import ImportRequest, ImportRunContext, ImportSummary, import_comments
from .write import RowWriteResult, write_row

__all__ = [
    "DEFAULT_STRATEGIES",
    "ByIdentifier",
    "ByIndexedField",
    "ColumnConfigurationError",
    "ColumnLayout",
    "CommentImportError",
    "DelimitedDialect",
    "FatalImportError",
    "ImportConfigurationError",
    "ImportFileError",
    "ImportLog",
    "ImportLogError",
    "ImportRequest",
    "ImportRunContext",
    "ImportSummary",
    "InvalidDateError",
    "InvalidRatingError",
    "MalformedRowError",
    "NormalizedRow",
    "RecordResolver",
    "ResolutionStrategy",
    "RowWriteResult",
    "compose_record_id",
    "import_comments",
    "index_request",
    "normalize_rating",
    "normalize_row",
    "read_records",
    "strategies_from_fields",
    "unescape_comment",
    "write_row",
]
