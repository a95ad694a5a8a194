"""Step 3: order retrieved passages into the context text shown to the model."""

from __future__ import annotations

import re

from doc_chat.config.settings import Settings
from doc_chat.generation.prompt_templates import NO_RESULTS_CONTEXT
from doc_chat.models.domain import SearchResult
from doc_chat.observability.logger import get_logger
from doc_chat.pipeline.context import BuiltContext, ChatContext
from doc_chat.pipeline.step import PipelineStep
from doc_chat.protocols.reranker import Reranker

logger = get_logger("context_building")

_TITLE_DATE_RE = re.compile(r"(?<!\d)(\d{2})(\d{2})(\d{2})(?!\d)")
TRUNCATION_MARKER = "[... content truncated ...]"


class ContextBuildingStep(PipelineStep):
    name = "context_building"

    def __init__(self, settings: Settings, reranker: Reranker | None = None) -> None:
        self._settings = settings
        self._reranker = reranker

    def should_execute(self, context: ChatContext) -> bool:
        return context.search is not None

    async def execute(self, context: ChatContext) -> ChatContext:
        results = list(context.search.results) if context.search else []

        if context.input.is_deep_think and self._reranker is not None and results:
            results = await self._reranker.rerank(context.input.message, results)

        results = results[: self._settings.context_max_results]
        if not results:
            logger.warning("no_search_results", session_id=context.input.session_id)
            return context.with_built_context(BuiltContext(text=NO_RESULTS_CONTEXT))

        text = self.build_text(results, context.input.message)
        logger.info("context_built", documents=len(results), chars=len(text))
        return context.with_built_context(BuiltContext(text=text, results=tuple(results)))

    def build_text(self, results: list[SearchResult], question: str) -> str:
        high = self._settings.high_relevance_threshold
        medium = self._settings.medium_relevance_threshold
        high_results = [r for r in results if r.score >= high]
        medium_results = [r for r in results if medium <= r.score < high]
        other_results = [r for r in results if r.score < medium]

        lines = [
            "=== SEARCH RESULT ANALYSIS ===",
            f"Question: {question}",
            f"{len(results)} documents found",
            "",
        ]
        if high_results:
            lines.append(f"High relevance documents ({len(high_results)}):")
            lines.append("")
            for i, result in enumerate(high_results, start=1):
                lines.extend(self._document_lines(i, result))
        if medium_results:
            lines.append(f"Medium relevance documents ({len(medium_results)}):")
            lines.append("")
            for i, result in enumerate(medium_results, start=1):
                lines.extend(self._document_lines(i, result))
        if other_results:
            preview = self._settings.max_other_results_preview
            lines.append(f"Other related documents ({len(other_results)}):")
            for result in other_results[:preview]:
                lines.append(f"- {result.title} (score: {result.score:.2f})")
            if len(other_results) > preview:
                lines.append(f"... and {len(other_results) - preview} more")
            lines.append("")
        return "\n".join(lines)

    def _document_lines(self, index: int, result: SearchResult) -> list[str]:
        header = f"   Relevance: {result.score:.2f}"
        date = _title_date(result.title)
        if date:
            header += f" | Date: {date}"
        lines = [f"{index}. {result.title}"]
        if result.web_url:
            lines.append(f"   Link: {result.web_url}")
        lines.append(f"   Path: {result.path}")
        lines.append(header)
        if result.keywords.strip():
            lines.append(f"   Keywords: {result.keywords}")

        content = result.content
        limit = self._settings.max_content_length
        if len(content) > limit:
            content = content[:limit] + "\n" + TRUNCATION_MARKER
        lines.append("   Content:")
        lines.append("   " + content.replace("\n", "\n   "))
        lines.append("")
        return lines


def _title_date(title: str) -> str | None:
    """Render a YYMMDD token in a title as YYYY-MM-DD."""
    match = _TITLE_DATE_RE.search(title)
    if match is None:
        return None
    yy, mm, dd = match.groups()
    if not (1 <= int(mm) <= 12 and 1 <= int(dd) <= 31):
        return None
    return f"20{yy}-{mm}-{dd}"
