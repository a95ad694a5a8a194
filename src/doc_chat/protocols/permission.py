"""Protocol for permission scoping of search results."""

from __future__ import annotations

from typing import Protocol

from doc_chat.models.domain import AllowedScope, SearchResult


class PermissionFilter(Protocol):
    async def allowed_scope(self, user_id: str) -> AllowedScope: ...

    async def filter(self, results: list[SearchResult], user_id: str) -> list[SearchResult]: ...
