"""Deterministic offline embedder built from hashed word vectors."""

from __future__ import annotations

import hashlib
import re
from collections import Counter

import numpy as np

from doc_chat.exceptions import EmbeddingError


class HashingEmbedder:
    """Averages per-word pseudo-random vectors seeded by the word's hash.

    No model download or network access; texts sharing words get similar vectors.
    """

    def __init__(self, dimensions: int = 256) -> None:
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        return self._embed(text)

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        return [self._embed(t) for t in texts]

    def _embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed blank text")
        words = re.findall(r"\w+", text.lower())
        vector = np.zeros(self._dimensions, dtype=np.float64)
        for word, count in Counter(words).items():
            vector += self._word_vector(word) * count
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.tolist()

    def _word_vector(self, word: str) -> np.ndarray:
        seed = int.from_bytes(hashlib.md5(word.encode("utf-8")).digest()[:8], "little")
        rng = np.random.default_rng(seed)
        return rng.standard_normal(self._dimensions)
