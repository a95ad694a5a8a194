"""Tests for semantic re-ranking."""

import pytest

from doc_chat.generation.reranker import SemanticReranker
from fakes import FakeEmbedder, make_result

VECTORS = {
    "query": [1.0, 0.0, 0.0],
    "close": [1.0, 0.0, 0.0],
    "far": [0.0, 1.0, 0.0],
}


async def test_semantic_similarity_reorders_head():
    reranker = SemanticReranker(FakeEmbedder(VECTORS), top_k=20)
    results = [make_result("a", 0.9, content="far"), make_result("b", 0.5, content="close")]
    reranked = await reranker.rerank("query", results)
    assert [r.id for r in reranked] == ["b", "a"]
    assert reranked[0].score == pytest.approx(0.5 * 0.4 + 1.0 * 0.6)
    assert reranked[1].score == pytest.approx(0.9 * 0.4)


async def test_original_score_capped_at_one():
    reranker = SemanticReranker(FakeEmbedder(VECTORS), top_k=20)
    results = [make_result("a", 7.0, content="far"), make_result("b", 0.1, content="far")]
    reranked = await reranker.rerank("query", results)
    assert reranked[0].score == pytest.approx(0.4)


async def test_tail_keeps_order_after_head():
    reranker = SemanticReranker(FakeEmbedder(VECTORS), top_k=2)
    results = [
        make_result("a", 0.9, content="far"),
        make_result("b", 0.5, content="close"),
        make_result("c", 0.4, content="close"),
        make_result("d", 0.3, content="far"),
    ]
    reranked = await reranker.rerank("query", results)
    assert [r.id for r in reranked] == ["b", "a", "c", "d"]
    assert reranked[2].score == 0.4


async def test_blank_content_kept_in_place():
    reranker = SemanticReranker(FakeEmbedder(VECTORS), top_k=20)
    results = [
        make_result("a", 0.9, content="far"),
        make_result("blank", 0.7, content="  "),
        make_result("c", 0.5, content="close"),
    ]
    reranked = await reranker.rerank("query", results)
    assert [r.id for r in reranked] == ["c", "blank", "a"]
    assert reranked[1] == results[1]


async def test_all_blank_head_returned_unchanged():
    embedder = FakeEmbedder(VECTORS)
    reranker = SemanticReranker(embedder, top_k=2)
    results = [
        make_result("a", 0.9, content=""),
        make_result("b", 0.5, content=" "),
        make_result("c", 0.4, content="close"),
    ]
    assert await reranker.rerank("query", results) == results
    assert embedder.embed_calls == 0


async def test_single_result_unchanged():
    embedder = FakeEmbedder(VECTORS)
    results = [make_result("a", 0.9, content="far")]
    assert await SemanticReranker(embedder).rerank("query", results) == results
    assert embedder.embed_calls == 0
