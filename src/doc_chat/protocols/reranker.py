"""Protocol for reranking providers."""

from __future__ import annotations

from typing import Protocol

from doc_chat.models.domain import SearchResult


class Reranker(Protocol):
    async def rerank(self, query: str, results: list[SearchResult]) -> list[SearchResult]: ...
