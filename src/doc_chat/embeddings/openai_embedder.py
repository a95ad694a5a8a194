"""OpenAI embedding provider."""

from __future__ import annotations

from openai import AsyncOpenAI

from doc_chat.exceptions import EmbeddingError
from doc_chat.observability.logger import get_logger

logger = get_logger("embeddings")


class OpenAIEmbedder:
    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        batch_size: int = 100,
        dimensions: int = 1536,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key)
        self._model = model
        self._batch_size = batch_size
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> list[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed blank text")
        try:
            response = await self._client.embeddings.create(input=[text], model=self._model)
        except Exception as e:
            raise EmbeddingError(f"Failed to embed text: {e}") from e
        return self._checked(response.data[0].embedding)

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        if any(not t or not t.strip() for t in texts):
            raise EmbeddingError("Cannot embed blank text")
        vectors: list[list[float]] = []
        try:
            for i in range(0, len(texts), self._batch_size):
                batch = texts[i : i + self._batch_size]
                response = await self._client.embeddings.create(input=batch, model=self._model)
                vectors.extend(item.embedding for item in response.data)
        except Exception as e:
            raise EmbeddingError(f"Failed to embed {len(texts)} texts: {e}") from e
        logger.info("embedded_texts", count=len(texts), model=self._model)
        return [self._checked(v) for v in vectors]

    def _checked(self, vector: list[float]) -> list[float]:
        if len(vector) != self._dimensions:
            raise EmbeddingError(
                f"Model {self._model} returned {len(vector)} dimensions, expected {self._dimensions}"
            )
        return vector
