"""Query type classification: keyword rules with optional LLM classification."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from doc_chat.config.constants import GREETING_PATTERNS
from doc_chat.exceptions import DocChatError
from doc_chat.generation.prompt_templates import QUERY_CLASSIFICATION_PROMPT
from doc_chat.models.domain import QueryAnalysis, QueryType
from doc_chat.observability.logger import get_logger
from doc_chat.protocols.llm import LLMProvider

logger = get_logger("query_classifier")

TYPE_PATTERNS: dict[QueryType, tuple[str, ...]] = {
    QueryType.MEETING_RECORDS: (
        "meeting", "meetings", "minutes", "agenda", "standup", "retrospective",
        "discussed", "decisions", "attendees",
    ),
    QueryType.PROJECT_STATUS: (
        "status", "progress", "roadmap", "milestone", "milestones", "blocker",
        "blockers", "deadline", "on track",
    ),
    QueryType.HOW_TO: (
        "how to", "how do", "how can", "how should", "steps to", "procedure",
        "guide", "instructions", "set up",
    ),
    QueryType.INFORMATION: ("who", "when", "where", "why", "what", "which"),
    QueryType.DOCUMENT_SEARCH: (
        "document", "documents", "doc", "docs", "page", "pages", "find", "search",
        "link", "wiki",
    ),
}

MAX_GREETING_WORDS = 4

_COMPILED = {
    query_type: [re.compile(rf"\b{re.escape(p)}\b") for p in patterns]
    for query_type, patterns in TYPE_PATTERNS.items()
}


def _is_greeting(text: str) -> bool:
    words = re.sub(r"[^\w\s]", " ", text).split()
    if not words or len(words) > MAX_GREETING_WORDS:
        return False
    joined = " ".join(words)
    return any(joined == g or joined.startswith(g + " ") for g in GREETING_PATTERNS)


def classify_by_rules(query: str) -> QueryAnalysis:
    """Pick the type with the most matched patterns; ties go to the earlier type."""
    text = query.lower().strip()
    scores = {
        query_type: sum(1 for pattern in patterns if pattern.search(text))
        for query_type, patterns in _COMPILED.items()
    }
    total = sum(scores.values())
    if total == 0:
        # A greeting only wins when nothing else in the message matches.
        if _is_greeting(text):
            return QueryAnalysis(type=QueryType.GREETING, confidence=1.0)
        return QueryAnalysis(type=QueryType.GENERAL, confidence=0.0)

    best = max(scores, key=lambda t: scores[t])
    return QueryAnalysis(type=best, confidence=round(scores[best] / total, 4))


class ClassificationResponse(BaseModel):
    query_type: QueryType
    confidence: float = Field(ge=0.0, le=1.0)


class QueryClassifier:
    """Classifies with the LLM when one is given, falling back to the rules."""

    def __init__(self, llm: LLMProvider | None = None) -> None:
        self._llm = llm

    async def classify(self, query: str) -> QueryAnalysis:
        if self._llm is not None:
            try:
                result = await self._llm.generate_structured(
                    QUERY_CLASSIFICATION_PROMPT.format(
                        query=query, types=", ".join(t.value for t in QueryType)
                    ),
                    ClassificationResponse,
                )
                return QueryAnalysis(type=result.query_type, confidence=result.confidence)
            except DocChatError as e:
                logger.warning("llm_classification_failed", error=str(e))

        analysis = classify_by_rules(query)
        logger.debug("query_classified", type=analysis.type.value, confidence=analysis.confidence)
        return analysis
