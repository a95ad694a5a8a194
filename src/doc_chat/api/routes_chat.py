"""Chat streaming and path listing endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse

from doc_chat.api.dependencies import (
    get_chat_service,
    get_path_enumerator,
    get_permission_filter,
)
from doc_chat.exceptions import AccessDeniedError
from doc_chat.models.domain import AllScope
from doc_chat.models.schemas import ChatRequest, PathsResponse
from doc_chat.permission.scope_filter import StaticPermissionFilter
from doc_chat.retrieval.paths import PathEnumerator
from doc_chat.service.chat_service import ChatService

router = APIRouter()


def format_sse(event: str, data: str) -> str:
    """One SSE frame; multi-line data is split over several ``data:`` lines."""
    lines = data.split("\n") if data else [""]
    return f"event: {event}\n" + "".join(f"data: {line}\n" for line in lines) + "\n"


@router.post("/chat/stream")
async def chat_stream(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """Stream answer tokens via Server-Sent Events."""

    async def event_generator():
        events = service.run_pipeline(
            request.message,
            session_id=request.session_id,
            user_email=request.user_email,
            is_deep_think=request.is_deep_think,
            keywords=request.keywords,
        )
        try:
            async for event in events:
                yield format_sse(event["event"], event["data"])
        finally:
            await events.aclose()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/paths", response_model=PathsResponse)
async def list_paths(
    user: str | None = None,
    enumerator: PathEnumerator = Depends(get_path_enumerator),
    permission_filter: StaticPermissionFilter = Depends(get_permission_filter),
) -> PathsResponse:
    try:
        scope = await permission_filter.allowed_scope(user) if user else AllScope()
    except AccessDeniedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return PathsResponse(user=user, paths=await enumerator.list_paths(scope))
