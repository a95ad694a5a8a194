"""FAISS inner-product vector store keyed by string ids."""

from __future__ import annotations

import threading
from collections.abc import Iterable

import faiss
import numpy as np

from doc_chat.observability.logger import get_logger

logger = get_logger("faiss_store")


class FAISSVectorStore:
    """Cosine similarity search; vectors are L2-normalized on the way in.

    Writes and searches run in worker threads, so both hold ``_lock``.
    """

    def __init__(self, dimensions: int) -> None:
        self._dimensions = dimensions
        self._index = faiss.IndexIDMap(faiss.IndexFlatIP(dimensions))
        self._int_to_id: dict[int, str] = {}
        self._id_to_int: dict[str, int] = {}
        self._next_id = 0
        self._lock = threading.Lock()

    def upsert(
        self,
        ids: list[str],
        embeddings: np.ndarray | None = None,
        remove: Iterable[str] = (),
    ) -> None:
        """Drop ``remove`` and any vectors stored under ``ids``, then add the new vectors."""
        if ids:
            embeddings = np.ascontiguousarray(embeddings, dtype=np.float32)
            if embeddings.shape != (len(ids), self._dimensions):
                raise ValueError(
                    f"Expected embeddings of shape ({len(ids)}, {self._dimensions}), "
                    f"got {embeddings.shape}"
                )
            faiss.normalize_L2(embeddings)

        with self._lock:
            stale = [i for i in {*remove, *ids} if i in self._id_to_int]
            if stale:
                self._index.remove_ids(
                    np.array([self._id_to_int[i] for i in stale], dtype=np.int64)
                )
                for doc_id in stale:
                    del self._int_to_id[self._id_to_int.pop(doc_id)]
            if ids:
                self._index.add_with_ids(
                    embeddings, np.array(self._assign(ids), dtype=np.int64)
                )
            total = self._index.ntotal
        logger.debug("faiss_upserted", count=len(ids), removed=len(stale), total=total)

    def search(self, query: np.ndarray, top_k: int) -> list[tuple[str, float]]:
        if top_k <= 0:
            return []
        query = np.ascontiguousarray(query, dtype=np.float32).reshape(1, -1)
        if query.shape[1] != self._dimensions:
            raise ValueError(
                f"Query has {query.shape[1]} dimensions, index has {self._dimensions}"
            )
        faiss.normalize_L2(query)
        with self._lock:
            if self._index.ntotal == 0:
                return []
            scores, indices = self._index.search(query, min(top_k, self._index.ntotal))
            ids = [self._int_to_id.get(int(idx)) for idx in indices[0]]
        return [(doc_id, float(score)) for doc_id, score in zip(ids, scores[0]) if doc_id]

    @property
    def size(self) -> int:
        return self._index.ntotal

    def _assign(self, ids: list[str]) -> list[int]:
        int_ids = []
        for doc_id in ids:
            self._id_to_int[doc_id] = self._next_id
            self._int_to_id[self._next_id] = doc_id
            self._next_id += 1
            int_ids.append(self._id_to_int[doc_id])
        return int_ids
