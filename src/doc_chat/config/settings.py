"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # Embedding
    embedding_provider: Literal["openai", "hashing"] = "openai"
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_batch_size: int = 100
    embedding_cache_db_path: str = "data/embedding_cache.db"

    # LLM / Gemini
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.3
    gemini_max_tokens: int = 4096
    llm_query_classification: bool = False

    # Chunking
    chunking_strategy: Literal["recursive_character", "semantic", "sentence_window"] = (
        "recursive_character"
    )
    chunk_size: int = 1000
    chunk_overlap: int = 200
    min_chunk_length_to_embed: int = 5
    max_num_chunks: int = 10000
    semantic_similarity_threshold: float = Field(default=0.75, gt=0.0, le=1.0)
    semantic_max_chunk_size: int = 1000
    sentence_window_size: int = 2

    # Hybrid field weights (linear blend, not normalized)
    keyword_text_weight: float = Field(default=0.7, ge=0.0)
    keyword_vector_weight: float = Field(default=0.3, ge=0.0)
    title_text_weight: float = Field(default=0.7, ge=0.0)
    title_vector_weight: float = Field(default=0.3, ge=0.0)
    content_text_weight: float = Field(default=0.4, ge=0.0)
    content_vector_weight: float = Field(default=0.6, ge=0.0)
    path_text_weight: float = Field(default=0.7, ge=0.0)
    path_vector_weight: float = Field(default=0.3, ge=0.0)

    # Fusion / search step
    search_top_k: int = 50
    path_page_size: int = 200
    date_boost_factor: float = Field(default=1.5, ge=0.0)
    path_boost_factor: float = Field(default=1.2, ge=0.0)

    # Context building
    context_max_results: int = 50
    high_relevance_threshold: float = 1.5
    medium_relevance_threshold: float = 0.5
    max_content_length: int = 2000
    max_other_results_preview: int = 10

    # Deep-think re-ranking
    rerank_top_k: int = 20
    rerank_original_weight: float = Field(default=0.4, ge=0.0)
    rerank_semantic_weight: float = Field(default=0.6, ge=0.0)

    # Token streaming
    stream_buffer_size: int = 64
    stream_overflow: Literal["block", "drop_oldest"] = "block"

    # Conversation history
    history_max_turns: int = 10

    # Permissions: user email -> knowledge base ids
    permission_grants: dict[str, list[str]] = Field(default_factory=dict)
    permission_default: Literal["all", "none"] = "all"

    # Documents indexed at startup (JSON list of {id, text, metadata})
    seed_documents_path: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {"env_file": ".env", "env_prefix": "DOC_CHAT_"}
