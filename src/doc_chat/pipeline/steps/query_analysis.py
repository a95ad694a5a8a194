"""Step 1: classify the query and extract search terms."""

from __future__ import annotations

from doc_chat.models.domain import QueryAnalysis
from doc_chat.observability.logger import get_logger
from doc_chat.pipeline.context import Analysis, ChatContext
from doc_chat.pipeline.step import PipelineStep
from doc_chat.query.classifier import QueryClassifier
from doc_chat.query.dates import extract_date_keywords
from doc_chat.query.keywords import KeywordExtractor
from doc_chat.query.understanding import detect_language, normalize_query

logger = get_logger("query_analysis")


class QueryAnalysisStep(PipelineStep):
    name = "query_analysis"

    def __init__(self, classifier: QueryClassifier, keyword_extractor: KeywordExtractor) -> None:
        self._classifier = classifier
        self._keyword_extractor = keyword_extractor

    async def execute(self, context: ChatContext) -> ChatContext:
        message = normalize_query(context.input.message)
        classified = await self._classifier.classify(message)

        provided = context.input.provided_keywords
        if provided is not None:
            keywords = tuple(k.strip() for k in provided if k.strip())
        else:
            keywords = tuple(self._keyword_extractor.extract(message))
        date_keywords = tuple(extract_date_keywords(message))

        analysis = Analysis(
            query_analysis=QueryAnalysis(
                type=classified.type, confidence=classified.confidence, keywords=keywords
            ),
            extracted_keywords=keywords,
            date_keywords=date_keywords,
            extracted_titles=keywords,
            extracted_contents=(message,) if message else (),
            extracted_paths=keywords,
            language=detect_language(message) if message else "en",
        )
        logger.info(
            "query_analyzed",
            type=classified.type.value,
            confidence=classified.confidence,
            keywords=list(keywords),
            keywords_provided=provided is not None,
            date_keywords=list(date_keywords),
            language=analysis.language,
        )
        return context.with_analysis(analysis)
