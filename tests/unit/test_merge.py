"""Tests for max-wins result merging."""

from doc_chat.models.domain import SearchType
from doc_chat.retrieval.merge import merge_max_wins
from fakes import make_result


def test_higher_score_wins_across_types():
    title = [make_result("a", 0.4, SearchType.TITLE)]
    content = [make_result("a", 0.9, SearchType.CONTENT)]
    [merged] = merge_max_wins([title, content], top_k=10)
    assert merged.score == 0.9
    assert merged.type is SearchType.CONTENT


def test_equal_scores_keep_earlier_declared_type():
    path = [make_result("a", 0.5, SearchType.PATH)]
    keyword = [make_result("a", 0.5, SearchType.KEYWORD)]
    assert merge_max_wins([path, keyword], 10)[0].type is SearchType.KEYWORD
    assert merge_max_wins([keyword, path], 10)[0].type is SearchType.KEYWORD


def test_sorted_by_score_then_id():
    merged = merge_max_wins(
        [
            [make_result("c", 0.5), make_result("a", 0.9)],
            [make_result("b", 0.5)],
        ],
        top_k=10,
    )
    assert [r.id for r in merged] == ["a", "b", "c"]


def test_ids_unique_and_truncated():
    lists = [[make_result(f"d{i}", i / 10) for i in range(10)] for _ in range(3)]
    merged = merge_max_wins(lists, top_k=4)
    assert [r.id for r in merged] == ["d9", "d8", "d7", "d6"]
    assert len({r.id for r in merged}) == len(merged)


def test_empty_inputs():
    assert merge_max_wins([], 10) == []
    assert merge_max_wins([[], []], 10) == []
    assert merge_max_wins([[make_result("a", 1.0)]], 0) == []
