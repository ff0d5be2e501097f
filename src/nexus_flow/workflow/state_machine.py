"""Pure transitions over :class:`~nexus_flow.workflow.models.WorkflowState`.

``apply(state, event)`` returns a new state and never mutates its input.
Illegal step transitions fail loudly with :class:`IllegalTransitionError`.
"""

from __future__ import annotations

from nexus_flow.workflow.errors import IllegalTransitionError
from nexus_flow.workflow.events import (
    FeedbackEdited,
    LogAppended,
    ModelSelected,
    ModeSelected,
    ProcessingFinished,
    StepApproved,
    StepFailed,
    StepStarted,
    StepSucceeded,
    WorkflowEvent,
    WorkflowReset,
)
from nexus_flow.workflow.models import StepStatus, WorkflowState, WorkflowStep

ALLOWED_TRANSITIONS: dict[StepStatus, set[StepStatus]] = {
    StepStatus.PENDING: {StepStatus.RUNNING},
    StepStatus.RUNNING: {StepStatus.PAUSED, StepStatus.ERROR},
    StepStatus.PAUSED: {StepStatus.RUNNING, StepStatus.COMPLETED},
    StepStatus.ERROR: {StepStatus.RUNNING},
    StepStatus.COMPLETED: set(),
}

INTERRUPTED_MESSAGE = "Step was interrupted before it finished. Run it again."


def check_transition(current: StepStatus, to: StepStatus) -> None:
    if to not in ALLOWED_TRANSITIONS.get(current, set()):
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")


def _replace_step(state: WorkflowState, index: int, step: WorkflowStep) -> WorkflowState:
    steps = state.steps[:index] + (step,) + state.steps[index + 1 :]
    return state.model_copy(update={"steps": steps})


def _move(step: WorkflowStep, to: StepStatus, **fields: object) -> WorkflowStep:
    check_transition(step.status, to)
    return step.model_copy(update={"status": to, **fields})


def _step_at(state: WorkflowState, index: int) -> WorkflowStep:
    if not 0 <= index < len(state.steps):
        raise IndexError(f"Step index {index} is out of range (0..{len(state.steps) - 1})")
    return state.steps[index]


def apply(state: WorkflowState, event: WorkflowEvent) -> WorkflowState:
    """Return the state that results from applying ``event`` to ``state``."""

    if isinstance(event, StepStarted):
        step = _step_at(state, event.index)
        running = _move(
            step,
            StepStatus.RUNNING,
            model_used=event.model_id,
            timestamp=event.timestamp,
            error=None,
        )
        return _replace_step(state, event.index, running).model_copy(
            update={"is_processing": True}
        )

    if isinstance(event, StepSucceeded):
        # Merge onto the step as it is *now*, so feedback typed while the call
        # was in flight survives.
        index = state.index_of(event.step_id)
        paused = _move(
            state.steps[index],
            StepStatus.PAUSED,
            result=event.result,
            error=None,
            latency=event.latency,
        )
        return _replace_step(state, index, paused)

    if isinstance(event, StepFailed):
        index = state.index_of(event.step_id)
        failed = _move(state.steps[index], StepStatus.ERROR, error=event.error)
        return _replace_step(state, index, failed)

    if isinstance(event, ProcessingFinished):
        return state.model_copy(update={"is_processing": False})

    if isinstance(event, StepApproved):
        if state.is_complete:
            raise IllegalTransitionError("Workflow is already complete")
        index = state.current_step_index
        step = state.steps[index]
        if step.status is not StepStatus.PAUSED:
            raise IllegalTransitionError(
                f"Only a paused step can be approved (step {index + 1} is {step.status.value})"
            )
        completed = _move(step, StepStatus.COMPLETED)
        return _replace_step(state, index, completed).model_copy(
            update={"current_step_index": index + 1}
        )

    if isinstance(event, WorkflowReset):
        return reset(state)

    if isinstance(event, ModelSelected):
        return state.model_copy(update={"selected_model": event.model_id})

    if isinstance(event, ModeSelected):
        return state.model_copy(update={"execution_mode": event.mode})

    if isinstance(event, FeedbackEdited):
        step = _step_at(state, event.index)
        return _replace_step(state, event.index, step.model_copy(update={"feedback": event.feedback}))

    if isinstance(event, LogAppended):
        history = (state.history + (event.entry,))[-event.limit :]
        return state.model_copy(update={"history": history})

    raise TypeError(f"Unsupported workflow event: {event!r}")


def reset(state: WorkflowState) -> WorkflowState:
    """Clear progress while keeping step definitions and log history."""

    steps = tuple(
        step.model_copy(
            update={
                "status": StepStatus.PENDING,
                "result": None,
                "error": None,
                "latency": None,
                "feedback": None,
            }
        )
        for step in state.steps
    )
    return state.model_copy(
        update={"steps": steps, "current_step_index": 0, "is_processing": False}
    )


def recover(state: WorkflowState) -> WorkflowState:
    """Normalise a state restored from disk.

    A snapshot taken mid-call would otherwise come back busy forever, so
    ``is_processing`` is cleared and any RUNNING step is marked ERROR.
    """

    steps = tuple(
        step.model_copy(update={"status": StepStatus.ERROR, "error": INTERRUPTED_MESSAGE})
        if step.status is StepStatus.RUNNING
        else step
        for step in state.steps
    )
    return state.model_copy(update={"steps": steps, "is_processing": False})
