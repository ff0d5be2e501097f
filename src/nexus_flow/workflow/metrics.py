"""Latency figures for completed steps."""

from __future__ import annotations

from collections.abc import Sequence

from nexus_flow.workflow.models import StepStatus, WorkflowStep


def latency_series(steps: Sequence[WorkflowStep]) -> list[tuple[str, int]]:
    """Return ``(label, latency_ms)`` for every completed step with a latency.

    Labels number the completed steps consecutively (``Step 1``, ``Step 2``...).
    """

    completed = [s for s in steps if s.status is StepStatus.COMPLETED and s.latency is not None]
    return [(f"Step {i + 1}", step.latency or 0) for i, step in enumerate(completed)]


def render_bars(series: Sequence[tuple[str, int]], width: int = 40) -> list[str]:
    if not series:
        return []
    peak = max(value for _, value in series) or 1
    label_width = max(len(label) for label, _ in series)
    return [
        f"{label.ljust(label_width)} | {'#' * max(1, round(value / peak * width))} {value}ms"
        for label, value in series
    ]
