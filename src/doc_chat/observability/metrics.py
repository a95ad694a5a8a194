"""Metric logging helpers."""

from __future__ import annotations

from doc_chat.observability.logger import get_logger

logger = get_logger("metrics")


def log_step_metrics(
    trace_id: str,
    durations: dict[str, float],
    executed: list[str],
    skipped: list[str],
    total_ms: float,
) -> None:
    logger.info(
        "pipeline_metrics",
        trace_id=trace_id,
        step_durations_ms=durations,
        executed=executed,
        skipped=skipped,
        total_ms=round(total_ms, 2),
    )


def log_search_metrics(
    session_id: str | None,
    criteria: list[str],
    fused: int,
    permitted: int,
    top_scores: list[float],
    duration_ms: float,
) -> None:
    logger.info(
        "search_metrics",
        session_id=session_id,
        criteria=criteria,
        fused=fused,
        permitted=permitted,
        top_scores=[round(s, 4) for s in top_scores[:5]],
        duration_ms=round(duration_ms, 2),
    )


def log_stream_metrics(
    session_id: str | None,
    tokens: int,
    dropped: int,
    outcome: str,
    duration_ms: float,
) -> None:
    logger.info(
        "stream_metrics",
        session_id=session_id,
        tokens=tokens,
        dropped=dropped,
        outcome=outcome,
        duration_ms=round(duration_ms, 2),
    )
