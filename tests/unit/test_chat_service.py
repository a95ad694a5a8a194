"""Tests for the streaming chat service."""

from doc_chat.exceptions import PipelineStepError
from doc_chat.models.domain import ConversationTurn, QueryAnalysis, QueryType
from doc_chat.pipeline.context import Analysis, ChatContext, Prompt
from doc_chat.service.chat_service import EVENT_DONE, EVENT_ERROR, EVENT_TOKEN, ChatService
from doc_chat.service.history import InMemoryChatHistory
from fakes import FakeLLM


class FakePipeline:
    def __init__(self, error=None):
        self.error = error
        self.inputs = []

    async def execute(self, context: ChatContext):
        self.inputs.append(context.input)
        if self.error:
            raise self.error
        return (
            context.with_analysis(
                Analysis(query_analysis=QueryAnalysis(type=QueryType.GENERAL, confidence=0.0))
            )
            .with_prompt(Prompt(text=f"PROMPT {context.input.message}"))
            .complete()
        )


async def events_of(service, *args, **kwargs):
    return [event async for event in service.run_pipeline(*args, **kwargs)]


async def test_streams_tokens_then_done():
    llm = FakeLLM(["Hel", "lo"])
    service = ChatService(FakePipeline(), llm, InMemoryChatHistory())
    events = await events_of(service, "hi there", session_id="s1")

    assert events == [
        {"event": EVENT_TOKEN, "data": "Hel"},
        {"event": EVENT_TOKEN, "data": "lo"},
        {"event": EVENT_DONE, "data": ""},
    ]
    assert llm.prompts == ["PROMPT hi there"]


async def test_pipeline_failure_is_single_error_event():
    llm = FakeLLM()
    service = ChatService(
        FakePipeline(error=PipelineStepError("document_search", "index down")),
        llm,
        InMemoryChatHistory(),
    )
    events = await events_of(service, "q")
    assert events == [{"event": EVENT_ERROR, "data": "[document_search] index down"}]
    assert llm.prompts == []


async def test_mid_stream_failure_ends_with_error_event():
    llm = FakeLLM(["a", "b", "c"], fail_after=2)
    history = InMemoryChatHistory()
    service = ChatService(FakePipeline(), llm, history)
    events = await events_of(service, "q", session_id="s1")

    assert [e["event"] for e in events] == [EVENT_TOKEN, EVENT_TOKEN, EVENT_ERROR]
    assert history.get("s1") == ()


async def test_completed_answer_recorded_in_history():
    pipeline = FakePipeline()
    history = InMemoryChatHistory()
    service = ChatService(pipeline, FakeLLM(["It ", "depends"]), history)

    await events_of(service, "first", session_id="s1")
    await events_of(service, "second", session_id="s1")

    assert pipeline.inputs[1].history == (ConversationTurn("first", "It depends"),)
    assert len(history.get("s1")) == 2


async def test_passes_request_options_to_pipeline():
    pipeline = FakePipeline()
    service = ChatService(pipeline, FakeLLM(), InMemoryChatHistory())
    await events_of(
        service, "q", user_email="a@example.com", is_deep_think=True, keywords=["leave"]
    )
    [user_input] = pipeline.inputs
    assert user_input.user_email == "a@example.com"
    assert user_input.is_deep_think
    assert user_input.provided_keywords == ("leave",)


async def test_consumer_leaving_early_closes_stream():
    llm = FakeLLM([f"t{i}" for i in range(100)], delay=0.005)
    service = ChatService(FakePipeline(), llm, InMemoryChatHistory(), buffer_size=2)
    events = service.run_pipeline("q", session_id="s1")
    first = await events.__anext__()
    assert first["event"] == EVENT_TOKEN
    await events.aclose()

    assert llm.closed
    assert llm.emitted < 100


def test_history_bounded_per_session():
    history = InMemoryChatHistory(max_turns=2)
    for i in range(3):
        history.append("s", ConversationTurn(f"q{i}", f"a{i}"))
    history.append(None, ConversationTurn("x", "y"))
    assert [t.question for t in history.get("s")] == ["q1", "q2"]
    assert history.get(None) == ()
    history.clear("s")
    assert history.get("s") == ()
