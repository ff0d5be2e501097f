"""Unit tests for the workflow state machine.

These tests assert that illegal transitions fail loudly and that every
transition returns a new state without touching the old one.
"""

from __future__ import annotations

import pytest

from nexus_flow.core.models import ModelId
from nexus_flow.workflow.errors import IllegalTransitionError
from nexus_flow.workflow.events import (
    FeedbackEdited,
    LogAppended,
    ProcessingFinished,
    StepApproved,
    StepFailed,
    StepStarted,
    StepSucceeded,
)
from nexus_flow.workflow.models import LogEntry, StepStatus, WorkflowState
from nexus_flow.workflow.state_machine import (
    INTERRUPTED_MESSAGE,
    apply,
    check_transition,
    recover,
    reset,
)


@pytest.fixture
def state(three_steps) -> WorkflowState:
    return WorkflowState(steps=three_steps, selected_model=ModelId.LLAMA_3)


def _with_statuses(state: WorkflowState, *statuses: StepStatus) -> WorkflowState:
    steps = tuple(
        step.model_copy(update={"status": status, "result": f"R{i}"})
        for i, (step, status) in enumerate(zip(state.steps, statuses, strict=True))
    )
    return state.model_copy(update={"steps": steps})


def test_transition_rejects_illegal_transitions() -> None:
    with pytest.raises(IllegalTransitionError):
        check_transition(StepStatus.PENDING, StepStatus.COMPLETED)
    with pytest.raises(IllegalTransitionError):
        check_transition(StepStatus.COMPLETED, StepStatus.RUNNING)
    with pytest.raises(IllegalTransitionError):
        check_transition(StepStatus.ERROR, StepStatus.PAUSED)


def test_start_then_succeed(state: WorkflowState) -> None:
    running = apply(state, StepStarted(index=0, model_id=ModelId.LLAMA_3, timestamp=1))
    assert running.is_processing is True
    assert running.steps[0].status is StepStatus.RUNNING
    assert running.steps[0].model_used is ModelId.LLAMA_3
    assert state.steps[0].status is StepStatus.PENDING

    paused = apply(running, StepSucceeded(step_id="s0", result="done", latency=12))
    assert paused.steps[0].status is StepStatus.PAUSED
    assert paused.steps[0].result == "done"
    assert paused.steps[0].latency == 12

    idle = apply(paused, ProcessingFinished())
    assert idle.is_processing is False


def test_success_merges_onto_current_step(state: WorkflowState) -> None:
    running = apply(state, StepStarted(index=1, model_id=ModelId.LLAMA_3, timestamp=1))
    edited = apply(running, FeedbackEdited(index=1, feedback="typed meanwhile"))

    paused = apply(edited, StepSucceeded(step_id="s1", result="R", latency=5))

    assert paused.steps[1].feedback == "typed meanwhile"
    assert paused.steps[1].result == "R"


def test_failure_requires_running_step(state: WorkflowState) -> None:
    with pytest.raises(IllegalTransitionError):
        apply(state, StepFailed(step_id="s0", error="nope"))


def test_approve_advances_index(state: WorkflowState) -> None:
    paused = _with_statuses(state, StepStatus.PAUSED, StepStatus.PENDING, StepStatus.PENDING)

    approved = apply(paused, StepApproved())

    assert approved.steps[0].status is StepStatus.COMPLETED
    assert approved.current_step_index == 1


def test_approve_on_complete_workflow_fails(state: WorkflowState) -> None:
    done = _with_statuses(
        state, StepStatus.COMPLETED, StepStatus.COMPLETED, StepStatus.COMPLETED
    ).model_copy(update={"current_step_index": 3})

    with pytest.raises(IllegalTransitionError):
        apply(done, StepApproved())


def test_reset_is_idempotent(state: WorkflowState) -> None:
    messy = _with_statuses(
        state, StepStatus.COMPLETED, StepStatus.ERROR, StepStatus.PAUSED
    ).model_copy(update={"current_step_index": 2, "is_processing": True})
    messy = apply(messy, FeedbackEdited(index=2, feedback="tweak"))
    messy = apply(messy, LogAppended(entry=LogEntry(message="kept")))

    once = reset(messy)
    twice = reset(once)

    assert once == twice
    assert once.current_step_index == 0
    assert once.is_processing is False
    assert all(step.status is StepStatus.PENDING for step in once.steps)
    assert all(step.feedback is None and step.result is None for step in once.steps)
    assert [e.message for e in once.history] == ["kept"]
    assert [s.prompt for s in once.steps] == [s.prompt for s in state.steps]


def test_log_ring_keeps_most_recent_in_order(state: WorkflowState) -> None:
    current = state
    for i in range(7):
        current = apply(current, LogAppended(entry=LogEntry(message=str(i)), limit=5))

    assert [e.message for e in current.history] == ["2", "3", "4", "5", "6"]


def test_recover_clears_interrupted_run(state: WorkflowState) -> None:
    interrupted = apply(state, StepStarted(index=0, model_id=ModelId.LLAMA_3, timestamp=1))

    recovered = recover(interrupted)

    assert recovered.is_processing is False
    assert recovered.steps[0].status is StepStatus.ERROR
    assert recovered.steps[0].error == INTERRUPTED_MESSAGE
