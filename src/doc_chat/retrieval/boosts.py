"""Contextual score boosts applied after fusion."""

from __future__ import annotations

from collections.abc import Sequence

from doc_chat.config.constants import PATH_SEPARATOR
from doc_chat.models.domain import SearchResult


def parent_path_segments(path: str) -> list[str]:
    """Lower-cased segments of ``path`` excluding the last (the page itself)."""
    segments = [s.strip().lower() for s in path.split(PATH_SEPARATOR)]
    segments = [s for s in segments if s]
    return segments[:-1]


def apply_contextual_boosts(
    results: Sequence[SearchResult],
    date_keywords: Sequence[str],
    keywords: Sequence[str],
    date_factor: float,
    path_factor: float,
) -> list[SearchResult]:
    """Multiply scores for date keywords in the title and keywords in parent paths.

    Both boosts can apply to the same result. The output is re-sorted by
    descending score with ascending id breaking ties.
    """
    dates = [d.lower() for d in date_keywords if d.strip()]
    words = {k.lower() for k in keywords if k.strip()}

    boosted = []
    for result in results:
        score = result.score
        title = result.title.lower()
        if dates and any(d in title for d in dates):
            score *= date_factor
        if words and words.intersection(parent_path_segments(result.path)):
            score *= path_factor
        boosted.append(result.with_score(score) if score != result.score else result)
    boosted.sort(key=lambda r: r.sort_key)
    return boosted
