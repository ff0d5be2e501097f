"""Prompt and context assembly for a step run."""

from __future__ import annotations

from collections.abc import Sequence

from nexus_flow.workflow.models import StepStatus, WorkflowStep

FEEDBACK_MAX_CHARS = 2000
FEEDBACK_HEADER = "IMPORTANT USER FEEDBACK:"


def sanitize_feedback(feedback: str | None, max_chars: int = FEEDBACK_MAX_CHARS) -> str | None:
    """Trim and truncate operator feedback. Blank feedback becomes ``None``."""

    if feedback is None:
        return None
    cleaned = feedback.strip()[:max_chars]
    return cleaned or None


def build_context(steps: Sequence[WorkflowStep], index: int) -> str:
    """Concatenate results of approved steps before ``index``, in order.

    Only COMPLETED steps contribute; paused, failed, running and pending steps
    add nothing.
    """

    blocks = [
        f"[Step: {step.title}]\nResult: {step.result}"
        for step in steps[:index]
        if step.status is StepStatus.COMPLETED and step.result
    ]
    return "\n\n".join(blocks)


def build_prompt(step: WorkflowStep, max_feedback_chars: int = FEEDBACK_MAX_CHARS) -> str:
    feedback = sanitize_feedback(step.feedback, max_feedback_chars)
    if feedback is None:
        return step.prompt
    return f"{step.prompt}\n\n{FEEDBACK_HEADER} {feedback}"
