"""Caching wrapper around an Embedder."""

from __future__ import annotations

from doc_chat.embeddings.cache import EmbeddingCache
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.embedder import Embedder

logger = get_logger("cached_embedder")


class CachedEmbedder:
    """Wraps any Embedder, checks EmbeddingCache first, calls delegate for misses."""

    def __init__(self, delegate: Embedder, cache: EmbeddingCache) -> None:
        self._delegate = delegate
        self._cache = cache

    @property
    def dimensions(self) -> int:
        return self._delegate.dimensions

    async def embed(self, text: str) -> list[float]:
        cached = await self._cache.get_many([text])
        if 0 in cached:
            return cached[0]
        embedding = await self._delegate.embed(text)
        await self._cache.put_many([text], [embedding])
        return embedding

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        cached = await self._cache.get_many(texts)
        misses = [i for i in range(len(texts)) if i not in cached]
        if misses:
            miss_texts = [texts[i] for i in misses]
            fresh = await self._delegate.embed_texts(miss_texts)
            await self._cache.put_many(miss_texts, fresh)
            cached.update(zip(misses, fresh))

        logger.debug(
            "embed_texts_with_cache",
            total=len(texts),
            hits=len(texts) - len(misses),
            misses=len(misses),
        )
        return [cached[i] for i in range(len(texts))]
