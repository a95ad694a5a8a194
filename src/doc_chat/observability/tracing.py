"""Per-run span timing for the chat pipeline."""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from uuid import uuid4


@dataclass
class Span:
    name: str
    start_ms: float
    end_ms: float = 0.0
    error: str | None = None

    @property
    def duration_ms(self) -> float:
        return self.end_ms - self.start_ms

    @property
    def failed(self) -> bool:
        return self.error is not None


class TraceContext:
    """Collects one span per executed step, including the step that failed."""

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or uuid4().hex
        self.spans: list[Span] = []
        self._start = time.monotonic()

    @contextmanager
    def span(self, name: str):
        s = Span(name=name, start_ms=self.elapsed_ms)
        try:
            yield s
        except Exception as e:
            s.error = type(e).__name__
            raise
        finally:
            s.end_ms = self.elapsed_ms
            self.spans.append(s)

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self._start) * 1000

    @property
    def failed_span(self) -> Span | None:
        return next((s for s in self.spans if s.failed), None)

    def durations(self) -> dict[str, float]:
        return {s.name: round(s.duration_ms, 2) for s in self.spans}
