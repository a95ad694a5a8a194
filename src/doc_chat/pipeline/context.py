"""Stage-gated, immutable context carried through the chat pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace

from doc_chat.exceptions import PipelineStepError
from doc_chat.models.domain import ConversationTurn, QueryAnalysis, SearchResult


@dataclass(frozen=True)
class UserInput:
    message: str
    session_id: str | None = None
    user_email: str | None = None
    provided_keywords: tuple[str, ...] | None = None
    is_deep_think: bool = False
    history: tuple[ConversationTurn, ...] = ()


@dataclass(frozen=True)
class Analysis:
    query_analysis: QueryAnalysis
    extracted_keywords: tuple[str, ...] = ()
    date_keywords: tuple[str, ...] = ()
    extracted_titles: tuple[str, ...] = ()
    extracted_contents: tuple[str, ...] = ()
    extracted_paths: tuple[str, ...] = ()
    language: str = "en"

    @property
    def all_keywords(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys((*self.extracted_keywords, *self.date_keywords)))


@dataclass(frozen=True)
class Search:
    results: tuple[SearchResult, ...] = ()


@dataclass(frozen=True)
class BuiltContext:
    text: str
    results: tuple[SearchResult, ...] = ()


@dataclass(frozen=True)
class Prompt:
    text: str


_STAGES = ("analysis", "search", "built_context", "prompt")


@dataclass(frozen=True)
class ChatContext:
    """Each stage is set at most once; ``with_*`` returns a new context."""

    input: UserInput
    analysis: Analysis | None = None
    search: Search | None = None
    built_context: BuiltContext | None = None
    prompt: Prompt | None = None
    executed_steps: tuple[str, ...] = ()

    @classmethod
    def start(cls, user_input: UserInput) -> ChatContext:
        return cls(input=user_input)

    def with_analysis(self, analysis: Analysis) -> ChatContext:
        return self._set("analysis", analysis)

    def with_search(self, search: Search) -> ChatContext:
        return self._set("search", search)

    def with_built_context(self, built_context: BuiltContext) -> ChatContext:
        return self._set("built_context", built_context)

    def with_prompt(self, prompt: Prompt) -> ChatContext:
        return self._set("prompt", prompt)

    def record_step(self, step_name: str) -> ChatContext:
        return replace(self, executed_steps=(*self.executed_steps, step_name))

    @property
    def populated_stages(self) -> tuple[str, ...]:
        return tuple(s for s in _STAGES if getattr(self, s) is not None)

    def require_analysis(self, step_name: str) -> Analysis:
        if self.analysis is None:
            raise PipelineStepError(step_name, "analysis stage is not available")
        return self.analysis

    def complete(self) -> CompleteChatContext:
        if self.analysis is None or self.prompt is None:
            missing = [s for s in ("analysis", "prompt") if getattr(self, s) is None]
            raise PipelineStepError("pipeline", f"context incomplete, missing {missing}")
        return CompleteChatContext(
            input=self.input,
            analysis=self.analysis,
            search=self.search,
            built_context=self.built_context,
            prompt=self.prompt,
            executed_steps=self.executed_steps,
        )

    def _set(self, stage: str, value) -> ChatContext:
        if getattr(self, stage) is not None:
            raise PipelineStepError("context", f"{stage} stage is already set")
        return replace(self, **{stage: value})


@dataclass(frozen=True)
class CompleteChatContext:
    """Terminal context: analysis and prompt are always present."""

    input: UserInput
    analysis: Analysis
    prompt: Prompt
    search: Search | None = None
    built_context: BuiltContext | None = None
    executed_steps: tuple[str, ...] = ()
