"""Tests for the chat pipeline orchestrator."""

import pytest

from doc_chat.exceptions import ConfigurationError, PipelineStepError, SearchBackendError
from doc_chat.models.domain import QueryAnalysis, QueryType
from doc_chat.pipeline.chat_pipeline import ChatPipeline, PipelineRun, PipelineState
from doc_chat.pipeline.context import Analysis, ChatContext, Prompt, Search, UserInput
from doc_chat.pipeline.step import PipelineStep, StepKind


class AnalyzeStep(PipelineStep):
    name = "analyze"

    def __init__(self, query_type=QueryType.HOW_TO):
        self.query_type = query_type

    async def execute(self, context):
        return context.with_analysis(
            Analysis(query_analysis=QueryAnalysis(type=self.query_type, confidence=1.0))
        )


class SearchStep(PipelineStep):
    name = "search"

    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def should_execute(self, context):
        return context.analysis.query_analysis.type.requires_grounding

    async def execute(self, context):
        self.calls += 1
        if self.error:
            raise self.error
        return context.with_search(Search())


class PromptStep(PipelineStep):
    name = "prompt"
    kind = StepKind.TERMINAL

    async def execute(self, context):
        return context.with_prompt(Prompt(text=f"answer: {context.input.message}"))


class NoopStep(PipelineStep):
    name = "noop"

    async def execute(self, context):
        return context


class DoubleStep(PipelineStep):
    name = "double"

    async def execute(self, context):
        return context.with_search(Search()).with_prompt(Prompt(text="early"))


def start(message="How do I request vacation?"):
    return ChatContext.start(UserInput(message=message))


async def test_runs_steps_in_order():
    run = PipelineRun()
    pipeline = ChatPipeline([AnalyzeStep(), SearchStep(), PromptStep()])
    complete = await pipeline.execute(start(), run)
    assert complete.executed_steps == ("analyze", "search", "prompt")
    assert complete.search is not None
    assert complete.prompt.text.startswith("answer:")
    assert run.state is PipelineState.COMPLETED
    assert run.step_index is None


async def test_skipped_step_leaves_stage_absent():
    search = SearchStep()
    run = PipelineRun()
    pipeline = ChatPipeline([AnalyzeStep(QueryType.GREETING), search, PromptStep()])
    complete = await pipeline.execute(start("hello"), run)
    assert complete.search is None
    assert "search" not in complete.executed_steps
    assert run.skipped == ["search"]
    assert search.calls == 0


async def test_domain_error_propagates_and_fails_run():
    run = PipelineRun()
    pipeline = ChatPipeline(
        [AnalyzeStep(), SearchStep(error=SearchBackendError("down")), PromptStep()]
    )
    with pytest.raises(SearchBackendError):
        await pipeline.execute(start(), run)
    assert run.state is PipelineState.FAILED
    assert run.step_index == 1
    assert isinstance(run.error, SearchBackendError)
    assert run.trace.failed_span.name == "search"
    assert set(run.trace.durations()) == {"analyze", "search"}


async def test_unexpected_error_wrapped_with_step_name():
    run = PipelineRun()
    pipeline = ChatPipeline([AnalyzeStep(), SearchStep(error=KeyError("x")), PromptStep()])
    with pytest.raises(PipelineStepError) as exc_info:
        await pipeline.execute(start(), run)
    assert exc_info.value.step_name == "search"
    assert isinstance(exc_info.value.__cause__, KeyError)
    assert run.state is PipelineState.FAILED


async def test_step_must_add_exactly_one_stage():
    with pytest.raises(PipelineStepError):
        await ChatPipeline([AnalyzeStep(), NoopStep(), PromptStep()]).execute(start())
    with pytest.raises(PipelineStepError):
        await ChatPipeline([AnalyzeStep(), DoubleStep(), PromptStep()]).execute(start())


async def test_failed_run_cannot_continue():
    run = PipelineRun()
    run.fail(PipelineStepError("x", "boom"))
    with pytest.raises(PipelineStepError):
        await ChatPipeline([AnalyzeStep(), PromptStep()]).execute(start(), run)


def test_requires_single_terminal_step_last():
    with pytest.raises(ConfigurationError):
        ChatPipeline([AnalyzeStep(), SearchStep()])
    with pytest.raises(ConfigurationError):
        ChatPipeline([PromptStep(), AnalyzeStep()])
    with pytest.raises(ConfigurationError):
        ChatPipeline([])


def test_rejects_duplicate_step_names():
    with pytest.raises(ConfigurationError):
        ChatPipeline([AnalyzeStep(), AnalyzeStep(), PromptStep()])


def test_step_names():
    pipeline = ChatPipeline([AnalyzeStep(), SearchStep(), PromptStep()])
    assert pipeline.step_names == ["analyze", "search", "prompt"]
