"""Semantic chunking: groups adjacent sentences whose embeddings stay similar."""

from __future__ import annotations

from doc_chat.chunking.sentences import build_chunk, split_into_sentences
from doc_chat.embeddings.similarity import cosine_similarity
from doc_chat.exceptions import ChunkingError
from doc_chat.models.domain import Chunk, Document
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.embedder import Embedder

logger = get_logger("semantic_chunker")


class SemanticChunker:
    name = "semantic"

    def __init__(
        self,
        embedder: Embedder,
        similarity_threshold: float = 0.75,
        max_chunk_size: int = 1000,
    ) -> None:
        if max_chunk_size <= 0:
            raise ChunkingError("max_chunk_size must be positive")
        if not 0.0 < similarity_threshold <= 1.0:
            raise ChunkingError("similarity_threshold must be in (0, 1]")
        self._embedder = embedder
        self._threshold = similarity_threshold
        self._max_chunk_size = max_chunk_size

    async def chunk(self, document: Document) -> list[Chunk]:
        sentences = split_into_sentences(document.text or "")
        if not sentences:
            return []
        if len(sentences) == 1:
            return [build_chunk(document, "semantic", sentences[0], 0, 1, self.name)]

        embeddings = await self._embedder.embed_texts(sentences)
        if len(embeddings) != len(sentences):
            raise ChunkingError(
                f"Embedder returned {len(embeddings)} vectors for {len(sentences)} sentences"
            )

        groups = self.group(sentences, embeddings)
        logger.debug(
            "semantic_chunked",
            document_id=document.id,
            sentences=len(sentences),
            chunks=len(groups),
        )
        return [
            build_chunk(document, "semantic", " ".join(group), i, len(groups), self.name)
            for i, group in enumerate(groups)
        ]

    def group(self, sentences: list[str], embeddings: list[list[float]]) -> list[list[str]]:
        """Greedily merge sentence i into the running group while similarity to
        sentence i-1 meets the threshold and the group is under the size limit."""
        groups: list[list[str]] = []
        current = [sentences[0]]
        for i in range(1, len(sentences)):
            similarity = cosine_similarity(embeddings[i - 1], embeddings[i])
            fits = len(" ".join(current)) < self._max_chunk_size
            # Zero-magnitude vectors give 0.0 and never merge.
            if similarity > 0.0 and similarity >= self._threshold and fits:
                current.append(sentences[i])
            else:
                groups.append(current)
                current = [sentences[i]]
        groups.append(current)
        return groups
