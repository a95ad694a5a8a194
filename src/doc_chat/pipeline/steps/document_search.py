"""Step 2: multi-field search, contextual boosts and permission narrowing."""

from __future__ import annotations

import time

from doc_chat.config.settings import Settings
from doc_chat.models.domain import SearchContents, SearchKeywords, SearchPaths, SearchTitles
from doc_chat.observability.metrics import log_search_metrics
from doc_chat.pipeline.context import ChatContext, Search
from doc_chat.pipeline.step import PipelineStep
from doc_chat.protocols.permission import PermissionFilter
from doc_chat.retrieval.boosts import apply_contextual_boosts
from doc_chat.retrieval.fusion import MultiFieldFusion


class DocumentSearchStep(PipelineStep):
    name = "document_search"

    def __init__(
        self,
        fusion: MultiFieldFusion,
        permission_filter: PermissionFilter,
        settings: Settings,
    ) -> None:
        self._fusion = fusion
        self._permission_filter = permission_filter
        self._settings = settings

    def should_execute(self, context: ChatContext) -> bool:
        return (
            context.analysis is not None
            and context.analysis.query_analysis.type.requires_grounding
        )

    async def execute(self, context: ChatContext) -> ChatContext:
        analysis = context.require_analysis(self.name)
        start = time.monotonic()

        criteria = [
            SearchKeywords.from_strings(analysis.all_keywords),
            SearchTitles.from_strings(analysis.extracted_titles),
            SearchContents.from_strings(analysis.extracted_contents),
            SearchPaths.from_strings(analysis.extracted_paths),
        ]
        results = await self._fusion.search(criteria, top_k=self._settings.search_top_k)
        results = apply_contextual_boosts(
            results,
            date_keywords=analysis.date_keywords,
            keywords=analysis.extracted_keywords,
            date_factor=self._settings.date_boost_factor,
            path_factor=self._settings.path_boost_factor,
        )
        fused_count = len(results)

        user_email = context.input.user_email
        if user_email:
            results = await self._permission_filter.filter(results, user_email)

        log_search_metrics(
            session_id=context.input.session_id,
            criteria=[c.search_type.value for c in criteria if c is not None],
            fused=fused_count,
            permitted=len(results),
            top_scores=[r.score for r in results],
            duration_ms=(time.monotonic() - start) * 1000,
        )
        return context.with_search(Search(results=tuple(results)))
