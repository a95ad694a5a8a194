"""Streaming chat entry point: pipeline, then LLM tokens as events."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator, Sequence

from doc_chat.exceptions import DocChatError
from doc_chat.models.domain import ConversationTurn
from doc_chat.observability.logger import get_logger
from doc_chat.observability.metrics import log_stream_metrics
from doc_chat.pipeline.chat_pipeline import ChatPipeline
from doc_chat.pipeline.context import ChatContext, UserInput
from doc_chat.protocols.llm import LLMProvider
from doc_chat.service.history import InMemoryChatHistory
from doc_chat.streaming.broadcaster import OverflowPolicy, TokenBroadcaster

logger = get_logger("chat_service")

EVENT_TOKEN = "token"
EVENT_ERROR = "error"
EVENT_DONE = "done"


class ChatService:
    def __init__(
        self,
        pipeline: ChatPipeline,
        llm: LLMProvider,
        history: InMemoryChatHistory,
        buffer_size: int = 64,
        overflow: OverflowPolicy = "block",
    ) -> None:
        self._pipeline = pipeline
        self._llm = llm
        self._history = history
        self._buffer_size = buffer_size
        self._overflow = overflow

    async def run_pipeline(
        self,
        message: str,
        session_id: str | None = None,
        user_email: str | None = None,
        is_deep_think: bool = False,
        keywords: Sequence[str] | None = None,
    ) -> AsyncIterator[dict[str, str]]:
        """Yield ``token`` events, then exactly one ``done`` or ``error`` event."""
        start = time.monotonic()
        user_input = UserInput(
            message=message,
            session_id=session_id,
            user_email=user_email,
            provided_keywords=tuple(keywords) if keywords is not None else None,
            is_deep_think=is_deep_think,
            history=self._history.get(session_id),
        )
        try:
            complete = await self._pipeline.execute(ChatContext.start(user_input))
        except DocChatError as e:
            yield {"event": EVENT_ERROR, "data": str(e)}
            return

        broadcaster = TokenBroadcaster(
            self._llm.stream_completion(complete.prompt.text),
            buffer_size=self._buffer_size,
            overflow=self._overflow,
        )
        subscription = broadcaster.subscribe()
        broadcaster.start()

        parts: list[str] = []
        outcome = "cancelled"
        try:
            try:
                async for token in subscription:
                    parts.append(token)
                    yield {"event": EVENT_TOKEN, "data": token}
            except DocChatError as e:
                outcome = "error"
                yield {"event": EVENT_ERROR, "data": str(e)}
                return

            outcome = "done"
            self._history.append(session_id, ConversationTurn(message, "".join(parts)))
            yield {"event": EVENT_DONE, "data": ""}
        finally:
            dropped = subscription.dropped
            await subscription.aclose()
            log_stream_metrics(
                session_id=session_id,
                tokens=len(parts),
                dropped=dropped,
                outcome=outcome,
                duration_ms=(time.monotonic() - start) * 1000,
            )
