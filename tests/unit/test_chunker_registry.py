"""Tests for per-knowledge-base chunking configuration."""

import pytest
from pydantic import ValidationError

from doc_chat.chunking.recursive_character import RecursiveCharacterChunker
from doc_chat.chunking.registry import ChunkerRegistry, ChunkingConfig, create_chunker
from doc_chat.chunking.semantic import SemanticChunker
from doc_chat.chunking.sentence_window import SentenceWindowChunker
from doc_chat.exceptions import ChunkingError
from doc_chat.models.domain import Document
from fakes import FakeEmbedder


def test_config_from_settings(settings):
    config = ChunkingConfig.from_settings(settings)
    assert config.strategy == "recursive_character"
    assert config.chunk_size == 1000
    assert config.chunk_overlap == 200


def test_create_chunker_variants():
    embedder = FakeEmbedder()
    assert isinstance(create_chunker(ChunkingConfig()), RecursiveCharacterChunker)
    assert isinstance(
        create_chunker(ChunkingConfig(strategy="semantic"), embedder), SemanticChunker
    )
    assert isinstance(
        create_chunker(ChunkingConfig(strategy="sentence_window")), SentenceWindowChunker
    )


def test_semantic_requires_embedder():
    with pytest.raises(ChunkingError):
        create_chunker(ChunkingConfig(strategy="semantic"))


def test_registry_resolution_order():
    registry = ChunkerRegistry(ChunkingConfig(), embedder=FakeEmbedder())
    registry.register_document_type("meeting", ChunkingConfig(strategy="sentence_window"))
    registry.register_knowledge_base("kb-research", ChunkingConfig(strategy="semantic"))

    plain = Document(id="a", text="x", metadata={})
    meeting = Document(id="b", text="x", metadata={"type": "Meeting"})
    both = Document(id="c", text="x", metadata={"type": "meeting", "knowledgeBaseId": "kb-research"})

    assert registry.chunker_for(plain).name == "recursive_character"
    assert registry.chunker_for(meeting).name == "sentence_window"
    assert registry.chunker_for(both).name == "semantic"


def test_registry_reuses_chunkers():
    registry = ChunkerRegistry(ChunkingConfig())
    doc = Document(id="a", text="x")
    assert registry.chunker_for(doc) is registry.chunker_for(doc)


def test_config_rejects_non_positive_similarity_threshold():
    with pytest.raises(ValidationError):
        ChunkingConfig(similarity_threshold=0.0)
