"""Sentence splitting and chunk construction shared by the chunking strategies."""

from __future__ import annotations

import re

from doc_chat.config.constants import SENTENCE_SPLIT_PATTERN
from doc_chat.models.domain import Chunk, Document

_SENTENCE_RE = re.compile(SENTENCE_SPLIT_PATTERN)


def split_into_sentences(text: str) -> list[str]:
    """Split on ., ! or ? followed by whitespace, keeping the punctuation."""
    return [s.strip() for s in _SENTENCE_RE.split(text) if s.strip()]


def build_chunk(
    document: Document,
    id_infix: str,
    text: str,
    index: int,
    total: int,
    strategy: str,
    **extra,
) -> Chunk:
    return Chunk(
        id=f"{document.id}_{id_infix}_{index}",
        document_id=document.id,
        text=text,
        metadata={
            **document.metadata,
            "chunkIndex": index,
            "totalChunks": total,
            "chunkingStrategy": strategy,
            **extra,
        },
    )
