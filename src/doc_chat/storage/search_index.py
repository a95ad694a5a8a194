"""In-memory hybrid search backend: one BM25 index and one FAISS store per field."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from doc_chat.exceptions import SearchBackendError
from doc_chat.keyword_search.bm25_index import BM25Index
from doc_chat.models.domain import ScanPage, SearchHit
from doc_chat.observability.logger import get_logger
from doc_chat.vectorstore.faiss_store import FAISSVectorStore

logger = get_logger("search_index")

SEARCHABLE_FIELDS = ("title", "content", "path", "keywords")


@dataclass(frozen=True)
class IndexEntry:
    """A chunk ready for indexing: stored document, per-field text and vectors."""

    id: str
    document: dict[str, Any]
    field_texts: dict[str, str]
    field_vectors: dict[str, list[float]] = field(default_factory=dict)


class InMemorySearchIndex:
    """Writers serialize on ``_lock`` and publish new snapshots; readers take no lock."""

    def __init__(self, dimensions: int) -> None:
        self._dimensions = dimensions
        self._documents: dict[str, dict[str, Any]] = {}
        self._field_texts: dict[str, dict[str, str]] = {f: {} for f in SEARCHABLE_FIELDS}
        self._bm25 = {f: BM25Index() for f in SEARCHABLE_FIELDS}
        self._vectors = {f: FAISSVectorStore(dimensions) for f in SEARCHABLE_FIELDS}
        self._lock = asyncio.Lock()

    async def add(self, entries: list[IndexEntry]) -> None:
        """Index entries; an entry whose id already exists replaces the old one."""
        if not entries:
            return
        async with self._lock:
            await asyncio.to_thread(self._write_sync, entries, None)
        logger.info("index_updated", added=len(entries), total=self.size)

    async def replace_document(self, document_id: str, entries: list[IndexEntry]) -> int:
        """Drop every chunk of ``document_id`` and index ``entries`` in their place.

        Returns the number of old chunks removed.
        """
        async with self._lock:
            removed = await asyncio.to_thread(self._write_sync, entries, document_id)
        logger.info(
            "document_replaced",
            document_id=document_id,
            removed=removed,
            added=len(entries),
            total=self.size,
        )
        return removed

    def _write_sync(self, entries: list[IndexEntry], document_id: str | None) -> int:
        documents = dict(self._documents)
        field_texts = {name: dict(texts) for name, texts in self._field_texts.items()}

        stale = [
            chunk_id
            for chunk_id, doc in documents.items()
            if document_id is not None and doc.get("documentId") == document_id
        ]
        for chunk_id in stale:
            del documents[chunk_id]
            for texts in field_texts.values():
                texts.pop(chunk_id, None)

        for entry in entries:
            documents[entry.id] = {**entry.document, "id": entry.id}
            for name in SEARCHABLE_FIELDS:
                field_texts[name][entry.id] = entry.field_texts.get(name, "")

        for name in SEARCHABLE_FIELDS:
            with_vectors = [e for e in entries if e.field_vectors.get(name)]
            self._vectors[name].upsert(
                [e.id for e in with_vectors],
                np.array([e.field_vectors[name] for e in with_vectors], dtype=np.float32),
                remove=[*stale, *(e.id for e in entries)],
            )
            self._bm25[name].build(list(field_texts[name].items()))

        self._documents = documents
        self._field_texts = field_texts
        return len(stale)

    async def lexical_query(self, field: str, text: str, top_k: int) -> list[SearchHit]:
        index = self._bm25.get(self._check_field(field))
        try:
            matches = await asyncio.to_thread(index.search, text, top_k)
        except Exception as e:
            raise SearchBackendError(f"Lexical query on '{field}' failed: {e}") from e
        return self._to_hits(matches)

    async def vector_query(
        self, field: str, vector: list[float], top_k: int
    ) -> list[SearchHit]:
        store = self._vectors.get(self._check_field(field))
        query = np.array(vector, dtype=np.float32)
        try:
            matches = await asyncio.to_thread(store.search, query, top_k)
        except Exception as e:
            raise SearchBackendError(f"Vector query on '{field}' failed: {e}") from e
        return self._to_hits(matches)

    async def scan_all(
        self, filters: dict[str, Any], page_token: str | None, page_size: int
    ) -> ScanPage:
        try:
            offset = int(page_token) if page_token else 0
        except ValueError as e:
            raise SearchBackendError(f"Malformed page token '{page_token}'") from e
        if page_size <= 0:
            raise SearchBackendError("page_size must be positive")

        documents = self._documents
        matching = [
            doc_id for doc_id in sorted(documents) if _matches(documents[doc_id], filters)
        ]
        page = matching[offset : offset + page_size]
        next_offset = offset + len(page)
        return ScanPage(
            hits=[SearchHit(id=i, score=0.0, document=documents[i]) for i in page],
            next_page_token=str(next_offset) if next_offset < len(matching) else None,
        )

    @property
    def size(self) -> int:
        return len(self._documents)

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _check_field(self, field: str) -> str:
        if field not in SEARCHABLE_FIELDS:
            raise SearchBackendError(f"Unknown search field '{field}'")
        return field

    def _to_hits(self, matches: list[tuple[str, float]]) -> list[SearchHit]:
        documents = self._documents
        return [
            SearchHit(id=doc_id, score=score, document=documents[doc_id])
            for doc_id, score in matches
            if doc_id in documents
        ]


def _matches(document: dict[str, Any], filters: dict[str, Any]) -> bool:
    for key, accepted in filters.items():
        value = document.get(key)
        if isinstance(accepted, (set, frozenset, list, tuple)):
            if value not in accepted:
                return False
        elif value != accepted:
            return False
    return True
