"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from doc_chat.api.dependencies import get_chat_pipeline, get_search_index
from doc_chat.models.schemas import HealthResponse
from doc_chat.pipeline.chat_pipeline import ChatPipeline
from doc_chat.storage.search_index import InMemorySearchIndex

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    search_index: InMemorySearchIndex = Depends(get_search_index),
    pipeline: ChatPipeline = Depends(get_chat_pipeline),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        indexed_chunks=search_index.size,
        embedding_dimensions=search_index.dimensions,
        pipeline_steps=pipeline.step_names,
    )
