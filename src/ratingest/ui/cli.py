from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dateutil import parser as date_parser
from dotenv import load_dotenv

from ratingest.app import import_comments_from_file
from ratingest.config import ConfigurationError, configure_logging
from ratingest.domain.comment_import import (
    ColumnLayout,
    DelimitedDialect,
    FatalImportError,
    ImportRequest,
    strategies_from_fields,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date_parser.parse(value).date()
    except (ValueError, OverflowError) as exc:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import record comments and ratings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    comments = subparsers.add_parser(
        "import-comments",
        help="Import comments and ratings from a delimited file",
    )
    comments.add_argument("source", help="Data source id of the records")
    comments.add_argument("file", type=Path, help="Delimited file to import")
    comments.add_argument("log", type=Path, help="Log file for import results")
    comments.add_argument(
        "--default-date",
        type=_parse_date,
        help="Date used for rows without a date (defaults to today)",
    )
    comments.add_argument(
        "--user-id",
        type=int,
        help="User id stored on imported comments",
    )
    comments.add_argument("--separator", default=",", help="Field separator (default: %(default)s)")
    comments.add_argument(
        "--enclosure",
        default='"',
        help="Field enclosure character (default: %(default)s)",
    )
    comments.add_argument("--escape", default="\\", help="Escape character (default: %(default)s)")
    comments.add_argument(
        "--id-fields",
        default="id",
        help="Comma-separated index fields tried in order to find a record (default: %(default)s)",
    )
    comments.add_argument(
        "--rating-multiplier",
        type=float,
        default=1.0,
        help="Multiplier that scales ratings to 0-100 (default: %(default)s)",
    )
    for name, default in (("id", 1), ("date", 2), ("comment", 3), ("rating", 4)):
        comments.add_argument(
            f"--{name}-column",
            type=int,
            default=default,
            help=f"1-based {name} column, 0 disables it (default: %(default)s)",
        )
    comments.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show every logged event on screen",
    )
    return parser


def _build_request(args: argparse.Namespace) -> ImportRequest:
    return ImportRequest(
        source_id=args.source,
        path=args.file,
        default_date=args.default_date,
        user_id=args.user_id,
        strategies=strategies_from_fields(args.id_fields.split(",")),
        rating_multiplier=args.rating_multiplier,
        layout=ColumnLayout(
            id_column=args.id_column,
            date_column=args.date_column,
            comment_column=args.comment_column,
            rating_column=args.rating_column,
        ),
        dialect=DelimitedDialect(
            separator=args.separator,
            enclosure=args.enclosure,
            escape=args.escape,
        ),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _build_parser().parse_args(args_list)

    try:
        if parsed_args.command == "import-comments":
            import_comments_from_file(
                _build_request(parsed_args),
                log_path=parsed_args.log,
                verbose=parsed_args.verbose,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (FatalImportError, ConfigurationError) as exc:
        log.error("Import aborted: %s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during import")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
