"""Protocol for single-field search strategies."""

from __future__ import annotations

from typing import Protocol

from doc_chat.models.domain import SearchCriteria, SearchResult, SearchType


class FieldSearchStrategy(Protocol):
    @property
    def name(self) -> str: ...

    @property
    def search_type(self) -> SearchType: ...

    async def search(self, criteria: SearchCriteria, top_k: int) -> list[SearchResult]: ...
