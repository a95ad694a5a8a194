"""Tests for domain value objects."""

import pytest

from doc_chat.embeddings.similarity import cosine_similarity
from doc_chat.models.domain import (
    AllScope,
    FieldWeights,
    QueryType,
    SearchContents,
    SearchKeywords,
    SearchTitles,
    SearchType,
    SubsetScope,
)


def test_cosine_similarity_identical():
    assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)


def test_cosine_similarity_orthogonal():
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)


def test_cosine_similarity_zero_vector():
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0


def test_cosine_similarity_length_mismatch():
    with pytest.raises(ValueError):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_criteria_normalizes_terms():
    criteria = SearchKeywords.from_strings(["  vacation ", "", "vacation", "leave   policy"])
    assert criteria.terms == ("vacation", "leave policy")
    assert criteria.to_query() == "vacation OR leave policy"
    assert criteria.search_type is SearchType.KEYWORD


def test_criteria_empty_input_is_none():
    assert SearchTitles.from_strings([]) is None
    assert SearchTitles.from_strings(["   "]) is None
    assert SearchContents.from_strings(None) is None


def test_criteria_variants_have_distinct_types():
    types = {c.search_type for c in (SearchKeywords, SearchTitles, SearchContents)}
    assert len(types) == 3


def test_field_weights_unnormalized_blend():
    weights = FieldWeights(text_weight=0.7, vector_weight=0.7)
    assert weights.combine(1.0, 1.0) == pytest.approx(1.4)


def test_field_weights_reject_negative():
    with pytest.raises(ValueError):
        FieldWeights(text_weight=-0.1, vector_weight=0.5)


def test_subset_scope_empty_is_not_all():
    empty = SubsetScope(set())
    assert empty.is_empty
    assert not empty.allows("kb-1")
    assert not AllScope().is_empty
    assert AllScope().allows("kb-1")
    assert empty != AllScope()


def test_all_scope_singleton():
    assert AllScope() is AllScope()


def test_subset_scope_equality():
    assert SubsetScope(["a", "b"]) == SubsetScope({"b", "a"})
    assert SubsetScope(["a"]).allows("a")
    assert not SubsetScope(["a"]).allows(None)


def test_greeting_does_not_require_grounding():
    assert not QueryType.GREETING.requires_grounding
    assert all(t.requires_grounding for t in QueryType if t is not QueryType.GREETING)


def test_search_type_priority_follows_declaration():
    assert SearchType.KEYWORD.priority < SearchType.TITLE.priority < SearchType.CONTENT.priority
