"""Document indexing endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from doc_chat.api.dependencies import get_indexing_pipeline
from doc_chat.exceptions import ChunkingError, EmbeddingError, SearchBackendError
from doc_chat.indexing.pipeline import IndexingPipeline
from doc_chat.models.schemas import IndexRequest, IndexResponse

router = APIRouter()


@router.post("/documents", response_model=IndexResponse)
async def index_documents(
    request: IndexRequest,
    pipeline: IndexingPipeline = Depends(get_indexing_pipeline),
) -> IndexResponse:
    try:
        chunks = await pipeline.index_documents(d.to_domain() for d in request.documents)
    except ChunkingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (EmbeddingError, SearchBackendError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    return IndexResponse(documents=len(request.documents), chunks_created=chunks)
