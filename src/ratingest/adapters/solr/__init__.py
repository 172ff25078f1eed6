"""Solr record index adapter."""

from __future__ import annotations

from .client import SolrAPIError, SolrClient
from .index import SolrRecordIndex
from .schema import SolrResponseBody, SolrSelectResponse

__all__ = [
    "SolrAPIError",
    "SolrClient",
    "SolrRecordIndex",
    "SolrResponseBody",
    "SolrSelectResponse",
]
