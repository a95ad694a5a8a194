"""Base class for chat pipeline steps."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from doc_chat.pipeline.context import ChatContext


class StepKind(str, Enum):
    ORDINARY = "ORDINARY"
    TERMINAL = "TERMINAL"


class PipelineStep(ABC):
    """One pipeline step.

    ``execute`` must return a new context with exactly one more stage set.
    A TERMINAL step sets the prompt and must be the last step.
    """

    name: str
    kind: StepKind = StepKind.ORDINARY

    def should_execute(self, context: ChatContext) -> bool:
        return True

    @abstractmethod
    async def execute(self, context: ChatContext) -> ChatContext: ...
