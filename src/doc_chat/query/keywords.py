"""Rule-based keyword extraction."""

from __future__ import annotations

from doc_chat.config.constants import MAX_EXTRACTED_KEYWORDS
from doc_chat.keyword_search.tokenizer import tokenize


class KeywordExtractor:
    """Content words of a message, longest first.

    Stopwords, single characters and bare numbers are dropped; equal-length
    words keep their order of appearance.
    """

    def __init__(self, max_keywords: int = MAX_EXTRACTED_KEYWORDS) -> None:
        self._max_keywords = max_keywords

    def extract(self, message: str) -> list[str]:
        words: list[str] = []
        for token in tokenize(message):
            if token.isdigit() or token in words:
                continue
            words.append(token)
        words.sort(key=len, reverse=True)
        return words[: self._max_keywords]
