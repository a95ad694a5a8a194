"""Builds the final prompt sent to the language model."""

from __future__ import annotations

from collections.abc import Sequence

from doc_chat.generation.prompt_templates import (
    BASE_PROMPT,
    COMMON_GUIDELINES,
    CONTEXT_SECTION,
    GUIDANCE_BY_TYPE,
    HISTORY_SECTION,
    NO_RESULTS_CONTEXT,
    QUESTION_SECTION,
)
from doc_chat.models.domain import ConversationTurn, QueryType


def format_history(history: Sequence[ConversationTurn]) -> str:
    return "\n".join(f"User: {t.question}\nAssistant: {t.answer}" for t in history)


class PromptBuilder:
    def guidance_for(self, query_type: QueryType) -> str:
        return GUIDANCE_BY_TYPE[query_type]

    def build(
        self,
        query_type: QueryType,
        context_text: str | None,
        question: str,
        history: Sequence[ConversationTurn] = (),
    ) -> str:
        sections = [BASE_PROMPT, self.guidance_for(query_type), COMMON_GUIDELINES]
        if history:
            sections.append(HISTORY_SECTION.format(history=format_history(history)))
        if query_type.requires_grounding or context_text:
            sections.append(CONTEXT_SECTION.format(context=context_text or NO_RESULTS_CONTEXT))
        sections.append(QUESTION_SECTION.format(question=question))
        return "\n\n".join(sections)
