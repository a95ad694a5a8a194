"""Enumerates the distinct document paths visible under an access scope."""

from __future__ import annotations

from doc_chat.models.domain import AllowedScope, SubsetScope
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.search_backend import SearchBackend

logger = get_logger("paths")

DEFAULT_PAGE_SIZE = 200


class PathEnumerator:
    def __init__(self, backend: SearchBackend, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._backend = backend
        self._page_size = page_size

    async def list_paths(self, scope: AllowedScope) -> list[str]:
        """Sorted distinct non-blank paths; ``[]`` for an empty scope or on backend errors."""
        if scope.is_empty:
            return []
        filters = (
            {"knowledgeBaseId": scope.ids} if isinstance(scope, SubsetScope) else {}
        )

        paths: set[str] = set()
        page_token: str | None = None
        pages = 0
        try:
            while True:
                page = await self._backend.scan_all(filters, page_token, self._page_size)
                pages += 1
                for hit in page.hits:
                    path = str(hit.document.get("path") or "").strip()
                    if path:
                        paths.add(path)
                if len(page.hits) < self._page_size or page.next_page_token is None:
                    break
                page_token = page.next_page_token
        except Exception as e:
            logger.error("path_enumeration_failed", error=str(e), pages=pages)
            return []

        logger.info("paths_enumerated", count=len(paths), pages=pages)
        return sorted(paths)
