"""HTTP client for the Solr select handler."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from .schema import SolrSelectResponse

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ratingest.config.index import IndexConfig

log = getLogger(__name__)


class SolrAPIError(RuntimeError):
    """Raised when Solr cannot be reached or returns an unexpected response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SolrClient:
    """Low-level synchronous client for ``<base_url>/<core>/select``."""

    def __init__(self, config: IndexConfig, client: httpx.Client | None = None) -> None:
        self._config = config
        self._client = client or httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            headers=dict(config.default_headers or {}),
        )
        self._owns_client = client is None

    def __enter__(self) -> SolrClient:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def select(
        self,
        query: str,
        *,
        filters: Sequence[str] = (),
        rows: int = 20,
        start: int = 0,
        fields: str | None = None,
    ) -> SolrSelectResponse:
        params: list[tuple[str, str | int]] = [
            ("q", query),
            ("wt", "json"),
            ("rows", rows),
            ("start", start),
        ]
        params.extend(("fq", value) for value in filters)
        if fields:
            params.append(("fl", fields))

        log.debug("Solr select q=%s fq=%s", query, list(filters))
        try:
            response = self._client.get(self._config.select_path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SolrAPIError(
                f"Solr returned HTTP {exc.response.status_code} for {query!r}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise SolrAPIError(f"Solr request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise SolrAPIError("Solr returned a non-JSON payload") from exc
        if not isinstance(payload, dict):
            raise SolrAPIError("Unexpected Solr response payload")

        try:
            return SolrSelectResponse.model_validate(payload)
        except ValidationError as exc:
            raise SolrAPIError(f"Unexpected Solr response payload: {exc}") from exc
