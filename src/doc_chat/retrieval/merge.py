"""Max-wins merge of ranked result lists from several field strategies."""

from __future__ import annotations

from collections.abc import Iterable

from doc_chat.models.domain import SearchResult


def merge_max_wins(
    result_lists: Iterable[list[SearchResult]],
    top_k: int,
) -> list[SearchResult]:
    """Merge result lists by id, keeping the best-scoring entry for each id.

    Args:
        result_lists: Ranked lists, one per strategy invocation.
        top_k: Maximum number of merged results returned.

    Returns:
        Results sorted by descending score, ties broken by ascending id. When two
        strategies give an id the same score, the type declared first in
        ``SearchType`` is kept, so the output does not depend on list order.
    """
    best: dict[str, SearchResult] = {}
    for result_list in result_lists:
        for result in result_list:
            current = best.get(result.id)
            if current is None or _beats(result, current):
                best[result.id] = result
    merged = sorted(best.values(), key=lambda r: r.sort_key)
    return merged[: max(top_k, 0)]


def _beats(candidate: SearchResult, current: SearchResult) -> bool:
    if candidate.score != current.score:
        return candidate.score > current.score
    return candidate.type.priority < current.type.priority
