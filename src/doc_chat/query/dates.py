"""Date keyword extraction for title-date boosting."""

from __future__ import annotations

import re

from doc_chat.config.constants import MONTH_NAMES

_YEAR_MONTH_RE = re.compile(r"\b(20\d{2})[-/.](\d{1,2})\b")
_SHORT_DATE_RE = re.compile(r"\b(\d{2})(\d{2})(\d{2})\b")
_MONTH_YEAR_RE = re.compile(
    r"\b(" + "|".join(MONTH_NAMES) + r")\b(?:\s+(20\d{2}))?", re.IGNORECASE
)
_YEAR_RE = re.compile(r"\b(20\d{2})\b")


def _year_month_variants(year: str, month: int) -> list[str]:
    mm = f"{month:02d}"
    return [
        f"{year}-{mm}", f"{year}/{mm}", f"{year[2:]}{mm}", MONTH_NAMES[month - 1].capitalize()
    ]


def extract_date_keywords(text: str) -> list[str]:
    """Date strings in the formats document titles commonly use.

    "2025-03", "March 2025" and "250310" all yield "2025-03", "2025/03",
    "2503" and "March"; a bare year yields itself. Order follows first
    appearance, duplicates removed.
    """
    keywords: list[str] = []

    def add(values) -> None:
        for value in values:
            if value not in keywords:
                keywords.append(value)

    for year, month in _YEAR_MONTH_RE.findall(text):
        if 1 <= int(month) <= 12:
            add(_year_month_variants(year, int(month)))

    for yy, mm, dd in _SHORT_DATE_RE.findall(text):
        if 1 <= int(mm) <= 12 and 1 <= int(dd) <= 31:
            add([f"{yy}{mm}{dd}"])
            add(_year_month_variants(f"20{yy}", int(mm)))

    for month_name, year in _MONTH_YEAR_RE.findall(text):
        month = MONTH_NAMES.index(month_name.lower()) + 1
        if year:
            add(_year_month_variants(year, month))
        else:
            add([month_name.capitalize()])

    add(_YEAR_RE.findall(text))
    return keywords
