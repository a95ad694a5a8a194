"""BM25 keyword index over one text field, using rank_bm25."""

from __future__ import annotations

import numpy as np
from rank_bm25 import BM25Okapi

from doc_chat.keyword_search.tokenizer import tokenize


class BM25Index:
    def __init__(self) -> None:
        # (scorer, doc ids) swapped as one value so readers never see a half-built index.
        self._state: tuple[BM25Okapi | None, list[str]] = (None, [])

    def build(self, entries: list[tuple[str, str]]) -> None:
        """Replace the index with (doc_id, text) entries; blank texts are skipped."""
        corpus: list[list[str]] = []
        doc_ids: list[str] = []
        for doc_id, text in entries:
            tokens = tokenize(text)
            if tokens:
                doc_ids.append(doc_id)
                corpus.append(tokens)
        self._state = (BM25Okapi(corpus) if corpus else None, doc_ids)

    def search(self, query: str, top_k: int = 50) -> list[tuple[str, float]]:
        """Returns (doc_id, score) pairs with positive score, best first."""
        bm25, doc_ids = self._state
        if bm25 is None or top_k <= 0:
            return []
        tokenized_query = tokenize(query)
        if not tokenized_query:
            return []
        scores = bm25.get_scores(tokenized_query)
        # Stable sort so equal scores keep insertion order.
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [(doc_ids[i], float(scores[i])) for i in order if scores[i] > 0]

    @property
    def size(self) -> int:
        return len(self._state[1])
