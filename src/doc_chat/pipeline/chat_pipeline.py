"""Ordered, conditional chat pipeline orchestrator."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from doc_chat.exceptions import ConfigurationError, DocChatError, PipelineStepError
from doc_chat.observability.logger import get_logger
from doc_chat.observability.metrics import log_step_metrics
from doc_chat.observability.tracing import TraceContext
from doc_chat.pipeline.context import ChatContext, CompleteChatContext
from doc_chat.pipeline.step import PipelineStep, StepKind

logger = get_logger("chat_pipeline")


class PipelineState(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass
class PipelineRun:
    """Progress of one pipeline execution. ``step_index`` is set while RUNNING."""

    state: PipelineState = PipelineState.NOT_STARTED
    step_index: int | None = None
    error: DocChatError | None = None
    skipped: list[str] = field(default_factory=list)
    trace: TraceContext = field(default_factory=TraceContext)

    def advance(self, step_index: int) -> None:
        if self.state not in (PipelineState.NOT_STARTED, PipelineState.RUNNING):
            raise PipelineStepError("pipeline", f"cannot run a step from state {self.state.value}")
        self.state = PipelineState.RUNNING
        self.step_index = step_index

    def complete(self) -> None:
        self.state = PipelineState.COMPLETED
        self.step_index = None

    def fail(self, error: DocChatError) -> None:
        self.state = PipelineState.FAILED
        self.error = error


class ChatPipeline:
    def __init__(self, steps: Sequence[PipelineStep]) -> None:
        terminal = [i for i, s in enumerate(steps) if s.kind is StepKind.TERMINAL]
        if len(terminal) != 1 or terminal[0] != len(steps) - 1:
            raise ConfigurationError("Pipeline needs exactly one TERMINAL step, placed last")
        names = [s.name for s in steps]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate pipeline step names: {names}")
        self._steps = tuple(steps)

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self._steps]

    async def execute(
        self, context: ChatContext, run: PipelineRun | None = None
    ) -> CompleteChatContext:
        """Run the steps in order; any step failure halts with the run FAILED."""
        run = run or PipelineRun()
        try:
            for index, step in enumerate(self._steps):
                run.advance(index)
                context = await self._run_step(step, context, run)
            complete = context.complete()
        except DocChatError as e:
            run.fail(e)
            logger.error(
                "pipeline_failed",
                trace_id=run.trace.trace_id,
                step_index=run.step_index,
                failed_span=run.trace.failed_span.name if run.trace.failed_span else None,
                step_durations_ms=run.trace.durations(),
                executed=list(context.executed_steps),
                error=str(e),
            )
            raise

        run.complete()
        log_step_metrics(
            run.trace.trace_id,
            run.trace.durations(),
            executed=list(complete.executed_steps),
            skipped=run.skipped,
            total_ms=run.trace.elapsed_ms,
        )
        return complete

    async def _run_step(
        self, step: PipelineStep, context: ChatContext, run: PipelineRun
    ) -> ChatContext:
        try:
            if not step.should_execute(context):
                run.skipped.append(step.name)
                logger.info("step_skipped", step=step.name)
                return context
            with run.trace.span(step.name):
                updated = await step.execute(context)
        except DocChatError:
            raise
        except Exception as e:
            raise PipelineStepError(step.name, f"{type(e).__name__}: {e}") from e

        added = len(updated.populated_stages) - len(context.populated_stages)
        if added != 1 or updated.input != context.input:
            raise PipelineStepError(step.name, f"step must set exactly one stage, set {added}")
        return updated.record_step(step.name)
