"""Bounded per-session conversation history."""

from __future__ import annotations

from collections import deque

from doc_chat.models.domain import ConversationTurn


class InMemoryChatHistory:
    def __init__(self, max_turns: int = 10) -> None:
        if max_turns < 0:
            raise ValueError("max_turns must be non-negative")
        self._max_turns = max_turns
        self._sessions: dict[str, deque[ConversationTurn]] = {}

    def get(self, session_id: str | None) -> tuple[ConversationTurn, ...]:
        if not session_id:
            return ()
        return tuple(self._sessions.get(session_id, ()))

    def append(self, session_id: str | None, turn: ConversationTurn) -> None:
        if not session_id or self._max_turns == 0:
            return
        turns = self._sessions.setdefault(session_id, deque(maxlen=self._max_turns))
        turns.append(turn)

    def clear(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
