"""Protocol for search index backends."""

from __future__ import annotations

from typing import Any, Protocol

from doc_chat.models.domain import ScanPage, SearchHit


class SearchBackend(Protocol):
    async def lexical_query(self, field: str, text: str, top_k: int) -> list[SearchHit]: ...

    async def vector_query(
        self, field: str, vector: list[float], top_k: int
    ) -> list[SearchHit]: ...

    async def scan_all(
        self, filters: dict[str, Any], page_token: str | None, page_size: int
    ) -> ScanPage:
        """Page through every indexed document matching ``filters``.

        ``filters`` maps a metadata field to the set of accepted values.
        """
        ...
