"""Sentence-window chunking: embed one sentence, keep its neighbours as context."""

from __future__ import annotations

from doc_chat.chunking.sentences import build_chunk, split_into_sentences
from doc_chat.exceptions import ChunkingError
from doc_chat.models.domain import Chunk, Document


class SentenceWindowChunker:
    name = "sentence_window"

    def __init__(self, window_size: int = 2) -> None:
        if window_size < 0:
            raise ChunkingError("window_size must be non-negative")
        self._window_size = window_size

    async def chunk(self, document: Document) -> list[Chunk]:
        sentences = split_into_sentences(document.text or "")
        total = len(sentences)
        chunks = []
        for i, sentence in enumerate(sentences):
            lo = max(0, i - self._window_size)
            hi = min(total, i + self._window_size + 1)
            chunks.append(
                build_chunk(
                    document,
                    "sentence",
                    sentence,
                    i,
                    total,
                    self.name,
                    sentenceIndex=i,
                    totalSentences=total,
                    windowContext=" ".join(sentences[lo:hi]),
                )
            )
        return chunks
