"""Record index (Solr) configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .env import optional_flag, optional_float, require_env_vars

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_INDEX_CORE = "biblio"
DEFAULT_INDEX_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class IndexConfig:
    """Location and behaviour of the record index used to resolve import rows."""

    base_url: str
    core: str = DEFAULT_INDEX_CORE
    timeout_seconds: float = DEFAULT_INDEX_TIMEOUT_SECONDS
    # Whether searches without an explicit deduplication filter return merged records
    deduplication: bool = True
    default_headers: Mapping[str, str] | None = None

    @property
    def select_path(self) -> str:
        return f"{self.core}/select"


def get_index_config() -> IndexConfig:
    values = require_env_vars(("RATINGEST_INDEX_URL",))
    core = os.getenv("RATINGEST_INDEX_CORE") or DEFAULT_INDEX_CORE
    return IndexConfig(
        base_url=values["RATINGEST_INDEX_URL"].rstrip("/"),
        core=core.strip(),
        timeout_seconds=optional_float("RATINGEST_INDEX_TIMEOUT", DEFAULT_INDEX_TIMEOUT_SECONDS),
        deduplication=optional_flag("RATINGEST_INDEX_DEDUPLICATION", default=True),
        default_headers={"User-Agent": "ratingest comment importer"},
    )
