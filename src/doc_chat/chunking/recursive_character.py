"""Fixed-size character chunker that prefers natural break points."""

from __future__ import annotations

from doc_chat.chunking.sentences import build_chunk
from doc_chat.config.constants import RECURSIVE_SEPARATORS
from doc_chat.exceptions import ChunkingError
from doc_chat.models.domain import Chunk, Document


class RecursiveCharacterChunker:
    """Splits text into windows of at most ``chunk_size`` characters.

    Each window ends at the last separator found in its second half, falling
    back to a hard cut. Consecutive windows share ``chunk_overlap`` characters;
    the shared length is recorded as ``overlapChars`` so that

        chunks[0].text + "".join(c.text[c.metadata["overlapChars"]:] for c in chunks[1:])

    reproduces the source text whenever ``max_num_chunks`` was not reached.
    """

    name = "recursive_character"

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        min_chunk_length_to_embed: int = 5,
        max_num_chunks: int = 10000,
        separators: tuple[str, ...] = RECURSIVE_SEPARATORS,
    ) -> None:
        if chunk_size <= 0:
            raise ChunkingError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ChunkingError("chunk_overlap must be in [0, chunk_size)")
        if max_num_chunks <= 0:
            raise ChunkingError("max_num_chunks must be positive")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._min_length = min_chunk_length_to_embed
        self._max_num_chunks = max_num_chunks
        self._separators = separators

    async def chunk(self, document: Document) -> list[Chunk]:
        return self.split(document)

    def split(self, document: Document) -> list[Chunk]:
        text = document.text or ""
        if not text or len(text.strip()) < self._min_length:
            return []

        windows = self._windows(text)
        total = len(windows)
        return [
            build_chunk(
                document,
                "chunk",
                text[start:end],
                i,
                total,
                self.name,
                overlapChars=overlap,
            )
            for i, (start, end, overlap) in enumerate(windows)
        ]

    def _windows(self, text: str) -> list[tuple[int, int, int]]:
        n = len(text)
        windows: list[tuple[int, int, int]] = []
        start = 0
        overlap = 0

        while start < n:
            end = min(start + self._chunk_size, n)
            if end < n:
                end = self._find_break(text, start, end)
            windows.append((start, end, overlap))
            if end >= n or len(windows) >= self._max_num_chunks:
                break
            next_start = end - self._chunk_overlap
            if next_start <= start:
                next_start = end
            overlap = end - next_start
            start = next_start

        # Fold a too-short tail into the previous window.
        if len(windows) > 1:
            start, end, overlap = windows[-1]
            if end == n and len(text[start + overlap : end].strip()) < self._min_length:
                prev_start, _, prev_overlap = windows[-2]
                windows[-2:] = [(prev_start, n, prev_overlap)]

        return windows

    def _find_break(self, text: str, start: int, end: int) -> int:
        lo = start + max(self._chunk_size // 2, self._chunk_overlap + 1)
        if lo >= end:
            return end
        for sep in self._separators:
            cut = text.rfind(sep, lo, end)
            if cut != -1:
                return cut + len(sep)
        return end
