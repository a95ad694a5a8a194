"""Registry resolving the chunking strategy for a document."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from doc_chat.chunking.recursive_character import RecursiveCharacterChunker
from doc_chat.chunking.semantic import SemanticChunker
from doc_chat.chunking.sentence_window import SentenceWindowChunker
from doc_chat.config.settings import Settings
from doc_chat.exceptions import ChunkingError
from doc_chat.models.domain import Document
from doc_chat.protocols.chunker import ChunkingStrategy
from doc_chat.protocols.embedder import Embedder


class ChunkingConfig(BaseModel):
    model_config = {"frozen": True}

    strategy: Literal["recursive_character", "semantic", "sentence_window"] = (
        "recursive_character"
    )
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    min_chunk_length_to_embed: int = Field(default=5, ge=0)
    max_num_chunks: int = Field(default=10000, gt=0)
    similarity_threshold: float = Field(default=0.75, gt=0.0, le=1.0)
    max_chunk_size: int = Field(default=1000, gt=0)
    window_size: int = Field(default=2, ge=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> ChunkingConfig:
        return cls(
            strategy=settings.chunking_strategy,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            min_chunk_length_to_embed=settings.min_chunk_length_to_embed,
            max_num_chunks=settings.max_num_chunks,
            similarity_threshold=settings.semantic_similarity_threshold,
            max_chunk_size=settings.semantic_max_chunk_size,
            window_size=settings.sentence_window_size,
        )


def create_chunker(config: ChunkingConfig, embedder: Embedder | None = None) -> ChunkingStrategy:
    if config.strategy == "recursive_character":
        return RecursiveCharacterChunker(
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap,
            min_chunk_length_to_embed=config.min_chunk_length_to_embed,
            max_num_chunks=config.max_num_chunks,
        )
    if config.strategy == "semantic":
        if embedder is None:
            raise ChunkingError("Semantic chunking requires an embedder")
        return SemanticChunker(
            embedder=embedder,
            similarity_threshold=config.similarity_threshold,
            max_chunk_size=config.max_chunk_size,
        )
    if config.strategy == "sentence_window":
        return SentenceWindowChunker(window_size=config.window_size)
    raise ChunkingError(f"Unknown chunking strategy '{config.strategy}'")


class ChunkerRegistry:
    """Chooses a chunker per knowledge base, then per document type, then the default."""

    def __init__(self, default: ChunkingConfig, embedder: Embedder | None = None) -> None:
        self._default = default
        self._embedder = embedder
        self._by_knowledge_base: dict[str, ChunkingConfig] = {}
        self._by_document_type: dict[str, ChunkingConfig] = {}
        self._chunkers: dict[ChunkingConfig, ChunkingStrategy] = {}

    def register_knowledge_base(self, knowledge_base_id: str, config: ChunkingConfig) -> None:
        self._by_knowledge_base[knowledge_base_id] = config

    def register_document_type(self, document_type: str, config: ChunkingConfig) -> None:
        self._by_document_type[document_type.lower()] = config

    def config_for(self, document: Document) -> ChunkingConfig:
        kb_id = document.metadata.get("knowledgeBaseId")
        if kb_id is not None and str(kb_id) in self._by_knowledge_base:
            return self._by_knowledge_base[str(kb_id)]
        doc_type = document.metadata.get("type")
        if doc_type is not None and str(doc_type).lower() in self._by_document_type:
            return self._by_document_type[str(doc_type).lower()]
        return self._default

    def chunker_for(self, document: Document) -> ChunkingStrategy:
        config = self.config_for(document)
        chunker = self._chunkers.get(config)
        if chunker is None:
            chunker = create_chunker(config, self._embedder)
            self._chunkers[config] = chunker
        return chunker
