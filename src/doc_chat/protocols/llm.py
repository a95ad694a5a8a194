"""Protocol for LLM providers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

from pydantic import BaseModel


class LLMProvider(Protocol):
    async def generate_structured(
        self,
        prompt: str,
        response_schema: type[BaseModel],
        system: str | None = None,
    ) -> BaseModel: ...

    def stream_completion(self, prompt: str) -> AsyncIterator[str]:
        """Yield answer tokens; closing the iterator stops generation."""
        ...
