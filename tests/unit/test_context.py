"""Unit tests for context and prompt assembly."""

from __future__ import annotations

import pytest

from nexus_flow.workflow.context import build_context, build_prompt, sanitize_feedback
from nexus_flow.workflow.models import StepStatus, WorkflowStep


def _step(i: int, status: StepStatus, result: str | None = None) -> WorkflowStep:
    return WorkflowStep(id=f"s{i}", title=f"T{i}", prompt=f"P{i}", status=status, result=result)


def test_context_contains_only_completed_prior_results() -> None:
    steps = [
        _step(0, StepStatus.COMPLETED, "R0"),
        _step(1, StepStatus.PAUSED, "R1"),
        _step(2, StepStatus.ERROR, "R2"),
        _step(3, StepStatus.COMPLETED, "R3"),
        _step(4, StepStatus.PENDING),
        _step(5, StepStatus.COMPLETED, "R5"),
    ]

    assert build_context(steps, 5) == "[Step: T0]\nResult: R0\n\n[Step: T3]\nResult: R3"


@pytest.mark.parametrize(
    "status",
    [StepStatus.PENDING, StepStatus.RUNNING, StepStatus.PAUSED, StepStatus.ERROR],
)
def test_non_completed_steps_contribute_nothing(status: StepStatus) -> None:
    steps = [_step(0, status, "R0"), _step(1, StepStatus.PENDING)]

    assert build_context(steps, 1) == ""


def test_context_ignores_later_steps() -> None:
    steps = [_step(0, StepStatus.COMPLETED, "R0"), _step(1, StepStatus.COMPLETED, "R1")]

    assert build_context(steps, 0) == ""
    assert build_context(steps, 1) == "[Step: T0]\nResult: R0"


def test_feedback_truncated_to_limit() -> None:
    raw = "  \n" + "a" * 5000 + "\t "

    sanitized = sanitize_feedback(raw)

    assert sanitized is not None
    assert len(sanitized) == 2000
    assert sanitized == sanitized.strip()


def test_blank_feedback_is_dropped() -> None:
    assert sanitize_feedback(None) is None
    assert sanitize_feedback("   ") is None


def test_prompt_appends_feedback_block_without_touching_template() -> None:
    step = WorkflowStep(id="s", title="T", prompt="Do it.", feedback="  shorter please ")

    first = build_prompt(step)

    assert first == "Do it.\n\nIMPORTANT USER FEEDBACK: shorter please"
    assert build_prompt(step) == first
    assert step.prompt == "Do it."


def test_prompt_without_feedback_is_template() -> None:
    step = WorkflowStep(id="s", title="T", prompt="Do it.")

    assert build_prompt(step) == "Do it."
