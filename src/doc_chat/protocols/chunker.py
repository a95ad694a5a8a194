"""Protocol for chunking strategies."""

from __future__ import annotations

from typing import Protocol

from doc_chat.models.domain import Chunk, Document


class ChunkingStrategy(Protocol):
    @property
    def name(self) -> str: ...

    async def chunk(self, document: Document) -> list[Chunk]: ...
