"""Word tokenization shared by BM25 indexing and keyword extraction."""

from __future__ import annotations

import re

from doc_chat.config.constants import STOPWORDS

_WORD_RE = re.compile(r"\w+")


def tokenize(text: str) -> list[str]:
    """Lower-cased word tokens without stopwords or single characters."""
    return [t for t in _WORD_RE.findall(text.lower()) if t not in STOPWORDS and len(t) > 1]
