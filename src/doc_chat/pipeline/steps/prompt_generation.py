"""Step 4 (terminal): assemble the prompt."""

from __future__ import annotations

from doc_chat.generation.prompt_builder import PromptBuilder
from doc_chat.observability.logger import get_logger
from doc_chat.pipeline.context import ChatContext, Prompt
from doc_chat.pipeline.step import PipelineStep, StepKind

logger = get_logger("prompt_generation")


class PromptGenerationStep(PipelineStep):
    name = "prompt_generation"
    kind = StepKind.TERMINAL

    def __init__(self, prompt_builder: PromptBuilder) -> None:
        self._prompt_builder = prompt_builder

    async def execute(self, context: ChatContext) -> ChatContext:
        analysis = context.require_analysis(self.name)
        context_text = context.built_context.text if context.built_context else None
        text = self._prompt_builder.build(
            analysis.query_analysis.type,
            context_text,
            context.input.message,
            context.input.history,
        )
        logger.info(
            "prompt_generated",
            type=analysis.query_analysis.type.value,
            chars=len(text),
            history_turns=len(context.input.history),
        )
        return context.with_prompt(Prompt(text=text))
