"""Fake collaborators shared by the test suite."""

from __future__ import annotations

import asyncio

from doc_chat.exceptions import LLMStreamError
from doc_chat.models.domain import ScanPage, SearchHit, SearchResult, SearchType


class FakeEmbedder:
    """Returns preset vectors by text, or a constant vector, and counts calls."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, dimensions: int = 3) -> None:
        self._vectors = vectors or {}
        self._dimensions = dimensions
        self.embed_calls = 0
        self.embed_texts_calls = 0

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        self.embed_calls += 1
        return self._vectors.get(text, [1.0] * self._dimensions)

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.embed_texts_calls += 1
        return [self._vectors.get(t, [1.0] * self._dimensions) for t in texts]


class FakeBackend:
    """Search backend returning preset hits per field."""

    def __init__(
        self,
        lexical: dict[str, list[SearchHit]] | None = None,
        vector: dict[str, list[SearchHit]] | None = None,
        documents: list[dict] | None = None,
        error: Exception | None = None,
    ) -> None:
        self._lexical = lexical or {}
        self._vector = vector or {}
        self._documents = documents or []
        self._error = error
        self.lexical_calls: list[tuple[str, str, int]] = []
        self.vector_calls: list[tuple[str, int]] = []
        self.scan_calls: list[tuple[dict, str | None, int]] = []

    async def lexical_query(self, field: str, text: str, top_k: int) -> list[SearchHit]:
        self.lexical_calls.append((field, text, top_k))
        if self._error:
            raise self._error
        return self._lexical.get(field, [])[:top_k]

    async def vector_query(self, field: str, vector: list[float], top_k: int) -> list[SearchHit]:
        self.vector_calls.append((field, top_k))
        if self._error:
            raise self._error
        return self._vector.get(field, [])[:top_k]

    async def scan_all(self, filters: dict, page_token: str | None, page_size: int) -> ScanPage:
        self.scan_calls.append((filters, page_token, page_size))
        if self._error:
            raise self._error
        accepted = filters.get("knowledgeBaseId")
        docs = [d for d in self._documents if accepted is None or d.get("knowledgeBaseId") in accepted]
        offset = int(page_token or 0)
        page = docs[offset : offset + page_size]
        next_offset = offset + len(page)
        return ScanPage(
            hits=[SearchHit(id=d["id"], score=0.0, document=d) for d in page],
            next_page_token=str(next_offset) if next_offset < len(docs) else None,
        )


class FakeLLM:
    """Streams preset tokens; optionally fails after ``fail_after`` tokens."""

    def __init__(
        self,
        tokens: list[str] | None = None,
        fail_after: int | None = None,
        delay: float = 0.0,
    ) -> None:
        self.tokens = tokens if tokens is not None else ["Hello", " ", "world"]
        self.fail_after = fail_after
        self.delay = delay
        self.prompts: list[str] = []
        self.emitted = 0
        self.closed = False

    async def generate_structured(self, prompt, response_schema, system=None):
        raise LLMStreamError("structured generation unavailable")

    async def stream_completion(self, prompt: str):
        self.prompts.append(prompt)
        try:
            for i, token in enumerate(self.tokens):
                if self.fail_after is not None and i >= self.fail_after:
                    raise LLMStreamError("model connection lost")
                if self.delay:
                    await asyncio.sleep(self.delay)
                self.emitted += 1
                yield token
        finally:
            self.closed = True


def make_result(
    doc_id: str,
    score: float,
    search_type: SearchType = SearchType.CONTENT,
    **fields,
) -> SearchResult:
    return SearchResult(
        id=doc_id,
        title=fields.pop("title", f"Title {doc_id}"),
        content=fields.pop("content", f"Content of {doc_id}"),
        path=fields.pop("path", "Space > Section"),
        score=score,
        type=search_type,
        **fields,
    )
