"""Query normalization and language detection."""

from __future__ import annotations

import re
import unicodedata

from langdetect import DetectorFactory, LangDetectException, detect

from doc_chat.observability.logger import get_logger

logger = get_logger("query_understanding")

DetectorFactory.seed = 0

DEFAULT_LANGUAGE = "en"


def normalize_query(text: str) -> str:
    text = unicodedata.normalize("NFKC", text)
    return re.sub(r"\s+", " ", text).strip()


def detect_language(text: str) -> str:
    """ISO 639-1 code of ``text``; falls back to English for undetectable input."""
    try:
        return detect(text)
    except LangDetectException:
        logger.debug("language_detection_failed", text_length=len(text))
        return DEFAULT_LANGUAGE
