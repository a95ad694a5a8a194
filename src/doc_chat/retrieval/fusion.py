"""Concurrent multi-field search with max-wins fusion."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

from doc_chat.exceptions import ConfigurationError
from doc_chat.models.domain import SearchCriteria, SearchResult, SearchType
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.search_strategy import FieldSearchStrategy
from doc_chat.retrieval.merge import merge_max_wins

logger = get_logger("fusion")

DEFAULT_TOP_K = 50


class MultiFieldFusion:
    def __init__(self, strategies: Mapping[SearchType, FieldSearchStrategy]) -> None:
        for search_type, strategy in strategies.items():
            if strategy.search_type is not search_type:
                raise ConfigurationError(
                    f"Strategy '{strategy.name}' registered for {search_type.value} "
                    f"handles {strategy.search_type.value}"
                )
        self._strategies = dict(strategies)

    @property
    def search_types(self) -> frozenset[SearchType]:
        return frozenset(self._strategies)

    async def search(
        self,
        criteria: Sequence[SearchCriteria | None],
        top_k: int = DEFAULT_TOP_K,
    ) -> list[SearchResult]:
        """Run one strategy call per supplied criteria and merge the results.

        ``None`` entries are skipped. The first strategy error is re-raised once
        the remaining calls are cancelled.
        """
        active = [c for c in criteria if c is not None and not c.is_empty()]
        if not active:
            return []

        strategies = [self._strategy_for(c) for c in active]
        tasks = [
            asyncio.ensure_future(s.search(c, top_k)) for s, c in zip(strategies, active)
        ]
        try:
            result_lists = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        merged = merge_max_wins(result_lists, top_k)
        logger.info(
            "fusion_completed",
            strategies=[c.search_type.value for c in active],
            candidates=sum(len(r) for r in result_lists),
            merged=len(merged),
            top_k=top_k,
        )
        return merged

    def _strategy_for(self, criteria: SearchCriteria) -> FieldSearchStrategy:
        strategy = self._strategies.get(criteria.search_type)
        if strategy is None:
            raise ConfigurationError(
                f"No search strategy registered for {criteria.search_type.value}"
            )
        return strategy
