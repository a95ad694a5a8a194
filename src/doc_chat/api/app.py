"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from doc_chat.api.middleware import RequestTimingMiddleware
from doc_chat.api.routes_chat import router as chat_router
from doc_chat.api.routes_documents import router as documents_router
from doc_chat.api.routes_health import router as health_router
from doc_chat.chunking.registry import ChunkerRegistry, ChunkingConfig
from doc_chat.config.settings import Settings
from doc_chat.embeddings.cache import EmbeddingCache
from doc_chat.embeddings.cached_embedder import CachedEmbedder
from doc_chat.embeddings.hashing_embedder import HashingEmbedder
from doc_chat.embeddings.openai_embedder import OpenAIEmbedder
from doc_chat.generation.gemini_provider import GeminiProvider
from doc_chat.generation.prompt_builder import PromptBuilder
from doc_chat.generation.reranker import SemanticReranker
from doc_chat.indexing.loader import load_documents
from doc_chat.indexing.pipeline import IndexingPipeline
from doc_chat.models.domain import AllScope, FieldWeights, SearchType
from doc_chat.observability.logger import get_logger, setup_logging
from doc_chat.permission.scope_filter import StaticPermissionFilter
from doc_chat.pipeline.chat_pipeline import ChatPipeline
from doc_chat.pipeline.steps.context_building import ContextBuildingStep
from doc_chat.pipeline.steps.document_search import DocumentSearchStep
from doc_chat.pipeline.steps.prompt_generation import PromptGenerationStep
from doc_chat.pipeline.steps.query_analysis import QueryAnalysisStep
from doc_chat.protocols.embedder import Embedder
from doc_chat.protocols.llm import LLMProvider
from doc_chat.query.classifier import QueryClassifier
from doc_chat.query.keywords import KeywordExtractor
from doc_chat.retrieval.field_strategy import (
    ContentSearchStrategy,
    KeywordSearchStrategy,
    PathSearchStrategy,
    TitleSearchStrategy,
)
from doc_chat.retrieval.fusion import MultiFieldFusion
from doc_chat.retrieval.logging_strategy import with_logging
from doc_chat.retrieval.paths import PathEnumerator
from doc_chat.service.chat_service import ChatService
from doc_chat.service.history import InMemoryChatHistory
from doc_chat.storage.search_index import InMemorySearchIndex

logger = get_logger("app")


async def build_embedder(settings: Settings) -> Embedder:
    if settings.embedding_provider == "hashing":
        return HashingEmbedder(dimensions=settings.embedding_dimensions)

    Path(settings.embedding_cache_db_path).parent.mkdir(parents=True, exist_ok=True)
    raw_embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        batch_size=settings.embedding_batch_size,
        dimensions=settings.embedding_dimensions,
    )
    cache = EmbeddingCache(settings.embedding_cache_db_path, model=settings.embedding_model)
    await cache.initialize()
    return CachedEmbedder(delegate=raw_embedder, cache=cache)


def build_fusion(
    settings: Settings, index: InMemorySearchIndex, embedder: Embedder
) -> MultiFieldFusion:
    strategies = {
        SearchType.KEYWORD: KeywordSearchStrategy(
            index,
            embedder,
            FieldWeights(settings.keyword_text_weight, settings.keyword_vector_weight),
        ),
        SearchType.TITLE: TitleSearchStrategy(
            index,
            embedder,
            FieldWeights(settings.title_text_weight, settings.title_vector_weight),
        ),
        SearchType.CONTENT: ContentSearchStrategy(
            index,
            embedder,
            FieldWeights(settings.content_text_weight, settings.content_vector_weight),
        ),
        SearchType.PATH: PathSearchStrategy(
            index,
            embedder,
            FieldWeights(settings.path_text_weight, settings.path_vector_weight),
        ),
    }
    return MultiFieldFusion(with_logging(strategies))


async def init_state(
    app: FastAPI,
    settings: Settings,
    embedder: Embedder | None = None,
    llm: LLMProvider | None = None,
) -> None:
    """Construct every collaborator once and attach it to ``app.state``."""
    embedder = embedder or await build_embedder(settings)
    llm = llm or GeminiProvider(
        api_key=settings.google_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_tokens=settings.gemini_max_tokens,
    )

    # Index
    search_index = InMemorySearchIndex(dimensions=embedder.dimensions)
    registry = ChunkerRegistry(ChunkingConfig.from_settings(settings), embedder=embedder)
    indexing_pipeline = IndexingPipeline(registry, embedder, search_index)

    # Permissions
    permission_filter = StaticPermissionFilter(
        grants=settings.permission_grants,
        default_scope=AllScope() if settings.permission_default == "all" else None,
    )

    # Chat pipeline
    classifier = QueryClassifier(llm=llm if settings.llm_query_classification else None)
    reranker = SemanticReranker(
        embedder,
        top_k=settings.rerank_top_k,
        original_weight=settings.rerank_original_weight,
        semantic_weight=settings.rerank_semantic_weight,
    )
    chat_pipeline = ChatPipeline(
        [
            QueryAnalysisStep(classifier, KeywordExtractor()),
            DocumentSearchStep(
                build_fusion(settings, search_index, embedder), permission_filter, settings
            ),
            ContextBuildingStep(settings, reranker=reranker),
            PromptGenerationStep(PromptBuilder()),
        ]
    )
    chat_service = ChatService(
        chat_pipeline,
        llm,
        InMemoryChatHistory(max_turns=settings.history_max_turns),
        buffer_size=settings.stream_buffer_size,
        overflow=settings.stream_overflow,
    )

    if settings.seed_documents_path:
        documents = load_documents(settings.seed_documents_path)
        await indexing_pipeline.index_documents(documents)

    app.state.settings = settings
    app.state.search_index = search_index
    app.state.indexing_pipeline = indexing_pipeline
    app.state.permission_filter = permission_filter
    app.state.path_enumerator = PathEnumerator(search_index, page_size=settings.path_page_size)
    app.state.chat_pipeline = chat_pipeline
    app.state.chat_service = chat_service

    logger.info(
        "startup_complete",
        indexed_chunks=search_index.size,
        embedding_provider=settings.embedding_provider,
        steps=chat_pipeline.step_names,
    )


def create_app(
    settings: Settings | None = None,
    embedder: Embedder | None = None,
    llm: LLMProvider | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or Settings()
        setup_logging(resolved.log_level, json_output=resolved.log_json)
        await init_state(app, resolved, embedder=embedder, llm=llm)
        yield
        logger.info("shutdown_complete")

    app = FastAPI(
        title="Doc Chat",
        version="1.0.0",
        description="Retrieval-augmented question answering over internal documents",
        lifespan=lifespan,
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(documents_router, tags=["documents"])
    app.include_router(chat_router, tags=["chat"])
    return app
