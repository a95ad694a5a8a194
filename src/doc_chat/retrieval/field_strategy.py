"""Hybrid per-field search: lexical and vector signals blended into one score."""

from __future__ import annotations

import asyncio
from typing import Any, ClassVar

from doc_chat.models.domain import (
    FieldWeights,
    SearchCriteria,
    SearchHit,
    SearchResult,
    SearchType,
)
from doc_chat.protocols.embedder import Embedder
from doc_chat.protocols.search_backend import SearchBackend


class HybridFieldSearchStrategy:
    """Searches one field family.

    Each hit's score is ``text_score * text_weight + vector_score * vector_weight``;
    a hit present in only one of the two result lists scores 0 for the other.
    Backend and embedder errors propagate unchanged.
    """

    search_type: ClassVar[SearchType]
    field_name: ClassVar[str]

    def __init__(
        self, backend: SearchBackend, embedder: Embedder, weights: FieldWeights
    ) -> None:
        self._backend = backend
        self._embedder = embedder
        self._weights = weights

    @property
    def name(self) -> str:
        return f"{self.search_type.value.lower()}_search"

    @property
    def weights(self) -> FieldWeights:
        return self._weights

    async def search(self, criteria: SearchCriteria, top_k: int) -> list[SearchResult]:
        if criteria.search_type is not self.search_type:
            raise ValueError(
                f"{type(self).__name__} cannot handle {criteria.search_type.value} criteria"
            )
        query = criteria.to_query()
        if not query.strip() or top_k <= 0:
            return []

        vector = await self._embedder.embed(query)
        lexical_hits, vector_hits = await asyncio.gather(
            self._backend.lexical_query(self.field_name, query, top_k),
            self._backend.vector_query(self.field_name, vector, top_k),
        )
        return self._blend(lexical_hits, vector_hits)[:top_k]

    def _blend(
        self, lexical_hits: list[SearchHit], vector_hits: list[SearchHit]
    ) -> list[SearchResult]:
        text_scores = {hit.id: hit.score for hit in lexical_hits}
        vector_scores = {hit.id: hit.score for hit in vector_hits}
        documents: dict[str, dict[str, Any]] = {}
        for hit in [*lexical_hits, *vector_hits]:
            documents.setdefault(hit.id, hit.document)

        results = [
            to_search_result(
                doc_id,
                document,
                self._weights.combine(
                    text_scores.get(doc_id, 0.0), vector_scores.get(doc_id, 0.0)
                ),
                self.search_type,
            )
            for doc_id, document in documents.items()
        ]
        results.sort(key=lambda r: r.sort_key)
        return results


class TitleSearchStrategy(HybridFieldSearchStrategy):
    search_type = SearchType.TITLE
    field_name = "title"


class ContentSearchStrategy(HybridFieldSearchStrategy):
    search_type = SearchType.CONTENT
    field_name = "content"


class PathSearchStrategy(HybridFieldSearchStrategy):
    search_type = SearchType.PATH
    field_name = "path"


class KeywordSearchStrategy(HybridFieldSearchStrategy):
    search_type = SearchType.KEYWORD
    field_name = "keywords"


def to_search_result(
    doc_id: str, document: dict[str, Any], score: float, search_type: SearchType
) -> SearchResult:
    keywords = document.get("keywords", "")
    if isinstance(keywords, (list, tuple)):
        keywords = ", ".join(str(k) for k in keywords)
    return SearchResult(
        id=doc_id,
        title=str(document.get("title", "")),
        content=str(document.get("content", "")),
        path=str(document.get("path", "")),
        score=score,
        type=search_type,
        space_key=str(document.get("spaceKey", "")),
        knowledge_base_id=str(document.get("knowledgeBaseId", "")),
        keywords=str(keywords),
        page_id=str(document.get("pageId", "")),
        web_url=str(document.get("webUrl", "")),
        download_url=str(document.get("downloadUrl", "")),
    )
