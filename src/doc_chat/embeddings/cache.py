"""SQLite-backed embedding cache keyed by model and text hash."""

from __future__ import annotations

import hashlib
import json

import aiosqlite

CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS embedding_cache (
    cache_key TEXT PRIMARY KEY,
    model TEXT NOT NULL,
    embedding TEXT NOT NULL
)
"""


class EmbeddingCache:
    def __init__(self, db_path: str, model: str) -> None:
        self._db_path = db_path
        self._model = model

    async def initialize(self) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(CREATE_CACHE_TABLE)
            await db.commit()

    async def get_many(self, texts: list[str]) -> dict[int, list[float]]:
        """Return {index: embedding} for the texts already cached."""
        if not texts:
            return {}
        keys = [self._key(t) for t in texts]
        indices_by_key: dict[str, list[int]] = {}
        for i, key in enumerate(keys):
            indices_by_key.setdefault(key, []).append(i)

        placeholders = ",".join("?" for _ in indices_by_key)
        found: dict[int, list[float]] = {}
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute(
                f"SELECT cache_key, embedding FROM embedding_cache WHERE cache_key IN ({placeholders})",
                list(indices_by_key),
            ) as cursor:
                async for key, raw in cursor:
                    vector = json.loads(raw)
                    for i in indices_by_key.get(key, []):
                        found[i] = vector
        return found

    async def put_many(self, texts: list[str], embeddings: list[list[float]]) -> None:
        if not texts:
            return
        rows = [(self._key(t), self._model, json.dumps(e)) for t, e in zip(texts, embeddings)]
        async with aiosqlite.connect(self._db_path) as db:
            await db.executemany(
                "INSERT OR REPLACE INTO embedding_cache (cache_key, model, embedding) VALUES (?, ?, ?)",
                rows,
            )
            await db.commit()

    def _key(self, text: str) -> str:
        return hashlib.sha256(f"{self._model}\x00{text}".encode("utf-8")).hexdigest()
