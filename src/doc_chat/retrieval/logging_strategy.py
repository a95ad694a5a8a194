"""Logging decorator for field search strategies."""

from __future__ import annotations

import time

from doc_chat.models.domain import SearchCriteria, SearchResult, SearchType
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.search_strategy import FieldSearchStrategy

logger = get_logger("search_strategy")


class LoggingSearchStrategy:
    """Wraps a strategy and logs each call's criteria, result count and duration."""

    def __init__(self, inner: FieldSearchStrategy) -> None:
        self._inner = inner

    @property
    def name(self) -> str:
        return self._inner.name

    @property
    def search_type(self) -> SearchType:
        return self._inner.search_type

    @property
    def inner(self) -> FieldSearchStrategy:
        return self._inner

    async def search(self, criteria: SearchCriteria, top_k: int) -> list[SearchResult]:
        start = time.monotonic()
        try:
            results = await self._inner.search(criteria, top_k)
        except Exception as e:
            logger.warning(
                "field_search_failed",
                strategy=self.name,
                terms=list(criteria.terms),
                error=str(e),
                duration_ms=round((time.monotonic() - start) * 1000, 2),
            )
            raise
        logger.info(
            "field_search_completed",
            strategy=self.name,
            terms=list(criteria.terms),
            top_k=top_k,
            results=len(results),
            top_score=round(results[0].score, 4) if results else None,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return results


def with_logging(
    strategies: dict[SearchType, FieldSearchStrategy],
) -> dict[SearchType, FieldSearchStrategy]:
    return {t: LoggingSearchStrategy(s) for t, s in strategies.items()}
