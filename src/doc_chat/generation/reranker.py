"""Semantic re-ranking of the top search results."""

from __future__ import annotations

from doc_chat.embeddings.similarity import cosine_similarity
from doc_chat.models.domain import SearchResult
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.embedder import Embedder

logger = get_logger("reranker")


class SemanticReranker:
    """Re-scores the first ``top_k`` results against the query embedding.

    New score = ``min(score, 1) * original_weight + cosine * semantic_weight``.
    Results with blank content are not embedded and keep their position and
    score; results past ``top_k`` keep their order and follow the head.
    """

    def __init__(
        self,
        embedder: Embedder,
        top_k: int = 20,
        original_weight: float = 0.4,
        semantic_weight: float = 0.6,
    ) -> None:
        self._embedder = embedder
        self._top_k = top_k
        self._original_weight = original_weight
        self._semantic_weight = semantic_weight

    async def rerank(self, query: str, results: list[SearchResult]) -> list[SearchResult]:
        if len(results) <= 1 or not query.strip():
            return list(results)

        head = list(results[: self._top_k])
        tail = results[self._top_k :]
        slots = [i for i, r in enumerate(head) if r.content.strip()]
        if not slots:
            return list(results)

        query_vector = await self._embedder.embed(query)
        doc_vectors = await self._embedder.embed_texts([head[i].content for i in slots])

        rescored = sorted(
            (
                head[i].with_score(
                    min(head[i].score, 1.0) * self._original_weight
                    + cosine_similarity(query_vector, vector) * self._semantic_weight
                )
                for i, vector in zip(slots, doc_vectors)
            ),
            key=lambda r: r.sort_key,
        )
        # Blank results keep their position and score; the rest fill the other slots.
        for i, result in zip(slots, rescored):
            head[i] = result
        logger.info(
            "reranked",
            input=len(head),
            rescored=len(rescored),
            top=[(r.id, round(r.score, 4)) for r in rescored[:5]],
        )
        return head + tail
