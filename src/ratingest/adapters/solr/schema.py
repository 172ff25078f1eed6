"""Solr select response schemas."""

from __future__ import annotations

import logging
from typing import ClassVar, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

SolrDocument: TypeAlias = dict[str, object]


class SolrBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Solr %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class SolrResponseHeader(SolrBaseModel):
    status: int = 0
    q_time: int | None = Field(default=None, alias="QTime")
    params: dict[str, object] | None = None


class SolrResponseBody(SolrBaseModel):
    num_found: int = Field(alias="numFound")
    start: int = 0
    num_found_exact: bool | None = Field(default=None, alias="numFoundExact")
    docs: list[SolrDocument] = Field(default_factory=list[SolrDocument])


class SolrSelectResponse(SolrBaseModel):
    response_header: SolrResponseHeader | None = Field(default=None, alias="responseHeader")
    response: SolrResponseBody
