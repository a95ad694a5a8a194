"""End-to-end chat flow over a small indexed corpus with offline components."""

import pytest
from fastapi import FastAPI

from doc_chat.api.app import init_state
from doc_chat.generation.prompt_templates import GREETING_GUIDANCE, HOW_TO_GUIDANCE
from doc_chat.models.domain import AllScope, QueryType, SearchType, SubsetScope
from doc_chat.pipeline.context import ChatContext, UserInput
from doc_chat.service.chat_service import EVENT_DONE, EVENT_TOKEN
from fakes import FakeLLM


async def build_state(settings, embedder, corpus, llm=None):
    app = FastAPI()
    await init_state(app, settings, embedder=embedder, llm=llm or FakeLLM())
    await app.state.indexing_pipeline.index_documents(corpus)
    return app.state


@pytest.fixture
async def state(settings, hashing_embedder, corpus):
    return await build_state(settings, hashing_embedder, corpus)


async def test_how_to_question_is_grounded_in_hr_procedure(state):
    complete = await state.chat_pipeline.execute(
        ChatContext.start(UserInput(message="How do I request vacation?"))
    )

    analysis = complete.analysis
    assert analysis.query_analysis.type is QueryType.HOW_TO
    assert analysis.extracted_keywords == ("vacation", "request")
    assert complete.executed_steps == (
        "query_analysis", "document_search", "context_building", "prompt_generation",
    )

    top = complete.search.results[0]
    assert top.id == "hr-leave_chunk_0"
    assert top.type is SearchType.CONTENT
    assert top.score > 0
    assert "HR" in top.path

    prompt = complete.prompt.text
    assert HOW_TO_GUIDANCE in prompt
    assert "Leave Procedures" in prompt
    assert "How do I request vacation?" in prompt


async def test_chat_stream_emits_tokens_then_done(state):
    events = [
        e async for e in state.chat_service.run_pipeline(
            "How do I request vacation?", session_id="s1"
        )
    ]
    assert [e["event"] for e in events] == [EVENT_TOKEN] * 3 + [EVENT_DONE]
    assert "".join(e["data"] for e in events[:-1]) == "Hello world"


async def test_greeting_skips_retrieval(state):
    complete = await state.chat_pipeline.execute(ChatContext.start(UserInput(message="hello")))
    assert complete.analysis.query_analysis.type is QueryType.GREETING
    assert complete.search is None
    assert complete.built_context is None
    assert complete.executed_steps == ("query_analysis", "prompt_generation")
    assert GREETING_GUIDANCE in complete.prompt.text


async def test_results_limited_to_user_scope(settings, hashing_embedder, corpus):
    scoped = settings.model_copy(update={"permission_grants": {"bob@example.com": ["kb-eng"]}})
    state = await build_state(scoped, hashing_embedder, corpus)
    complete = await state.chat_pipeline.execute(
        ChatContext.start(
            UserInput(message="How do I request vacation?", user_email="bob@example.com")
        )
    )
    assert complete.search.results
    assert {r.knowledge_base_id for r in complete.search.results} == {"kb-eng"}


async def test_deep_think_reranks_context(state):
    complete = await state.chat_pipeline.execute(
        ChatContext.start(UserInput(message="How do I request vacation?", is_deep_think=True))
    )
    reranked = complete.built_context.results
    assert reranked
    assert all(r.score <= 1.0 + 1e-6 for r in reranked)


async def test_paths_listed_per_scope(state):
    assert await state.path_enumerator.list_paths(AllScope()) == [
        "Engineering > Meetings > Weekly Sync 250310",
        "Engineering > Operations > Deployment Process",
        "Finance > Expenses",
        "HR > Policies > Leave Procedures",
    ]
    assert await state.path_enumerator.list_paths(SubsetScope({"kb-fin"})) == [
        "Finance > Expenses"
    ]
