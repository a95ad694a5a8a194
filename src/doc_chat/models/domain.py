"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar


@dataclass(frozen=True)
class Document:
    id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Chunk:
    id: str
    document_id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FieldWeights:
    text_weight: float
    vector_weight: float

    def __post_init__(self) -> None:
        if self.text_weight < 0 or self.vector_weight < 0:
            raise ValueError("field weights must be non-negative")

    def combine(self, text_score: float, vector_score: float) -> float:
        return text_score * self.text_weight + vector_score * self.vector_weight


class SearchType(str, Enum):
    # Declaration order breaks score ties during fusion.
    KEYWORD = "KEYWORD"
    TITLE = "TITLE"
    CONTENT = "CONTENT"
    PATH = "PATH"

    @property
    def priority(self) -> int:
        return list(SearchType).index(self)


def _normalize_terms(values) -> tuple[str, ...]:
    terms: list[str] = []
    for value in values:
        term = " ".join(str(value).split())
        if term and term not in terms:
            terms.append(term)
    return tuple(terms)


@dataclass(frozen=True)
class SearchCriteria:
    """One field family to search, wrapping normalized terms."""

    terms: tuple[str, ...]
    search_type: ClassVar[SearchType]

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", _normalize_terms(self.terms))

    @classmethod
    def from_strings(cls, values) -> SearchCriteria | None:
        """Build criteria from raw strings, or None when nothing usable remains."""
        criteria = cls(tuple(values or ()))
        return criteria if criteria.terms else None

    def to_query(self) -> str:
        return " OR ".join(self.terms)

    def is_empty(self) -> bool:
        return not self.terms


@dataclass(frozen=True)
class SearchKeywords(SearchCriteria):
    search_type: ClassVar[SearchType] = SearchType.KEYWORD


@dataclass(frozen=True)
class SearchTitles(SearchCriteria):
    search_type: ClassVar[SearchType] = SearchType.TITLE


@dataclass(frozen=True)
class SearchContents(SearchCriteria):
    search_type: ClassVar[SearchType] = SearchType.CONTENT


@dataclass(frozen=True)
class SearchPaths(SearchCriteria):
    search_type: ClassVar[SearchType] = SearchType.PATH


@dataclass(frozen=True)
class SearchHit:
    """A single scored hit returned by a search backend."""

    id: str
    score: float
    document: dict[str, Any]


@dataclass(frozen=True)
class ScanPage:
    hits: list[SearchHit]
    next_page_token: str | None = None


@dataclass(frozen=True)
class SearchResult:
    id: str
    title: str
    content: str
    path: str
    score: float
    type: SearchType
    space_key: str = ""
    knowledge_base_id: str = ""
    keywords: str = ""
    page_id: str = ""
    web_url: str = ""
    download_url: str = ""

    def with_score(self, score: float) -> SearchResult:
        return replace(self, score=score)

    @property
    def sort_key(self) -> tuple[float, str]:
        return (-self.score, self.id)


class AllowedScope:
    """Knowledge bases a caller may see."""

    def allows(self, knowledge_base_id: str | None) -> bool:
        raise NotImplementedError

    @property
    def is_empty(self) -> bool:
        return False


class AllScope(AllowedScope):
    _instance: AllScope | None = None

    def __new__(cls) -> AllScope:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def allows(self, knowledge_base_id: str | None) -> bool:
        return True

    def __repr__(self) -> str:
        return "AllScope()"


class SubsetScope(AllowedScope):
    """Restricts access to a set of knowledge base ids. An empty set allows nothing."""

    def __init__(self, ids) -> None:
        self.ids: frozenset[str] = frozenset(ids)

    def allows(self, knowledge_base_id: str | None) -> bool:
        return knowledge_base_id is not None and knowledge_base_id in self.ids

    @property
    def is_empty(self) -> bool:
        return not self.ids

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SubsetScope) and other.ids == self.ids

    def __hash__(self) -> int:
        return hash(self.ids)

    def __repr__(self) -> str:
        return f"SubsetScope({sorted(self.ids)!r})"


class QueryType(str, Enum):
    MEETING_RECORDS = "MEETING_RECORDS"
    PROJECT_STATUS = "PROJECT_STATUS"
    HOW_TO = "HOW_TO"
    INFORMATION = "INFORMATION"
    DOCUMENT_SEARCH = "DOCUMENT_SEARCH"
    GREETING = "GREETING"
    GENERAL = "GENERAL"

    @property
    def requires_grounding(self) -> bool:
        return self is not QueryType.GREETING


@dataclass(frozen=True)
class QueryAnalysis:
    type: QueryType
    confidence: float
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ConversationTurn:
    question: str
    answer: str
