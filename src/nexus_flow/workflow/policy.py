from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from nexus_flow.core.models import ExecutionMode
from nexus_flow.workflow.models import StepStatus, WorkflowState


class NextStep(str, Enum):
    RUN = "run"
    APPROVE = "approve"
    STOP = "stop"


@dataclass(frozen=True, slots=True)
class RunPolicy:
    """How far a single run request may go.

    ``max_steps`` is ``None`` for "run to the end". A paused step is only
    approved automatically when ``auto_approve`` is set and more steps are
    still allowed; the last step a run executes is always left for review.
    """

    max_steps: int | None
    auto_approve: bool = False

    @classmethod
    def for_mode(cls, mode: ExecutionMode, *, batch_size: int, auto_approve: bool = False) -> RunPolicy:
        if mode is ExecutionMode.STEP:
            return cls(max_steps=1, auto_approve=auto_approve)
        if mode is ExecutionMode.BATCH:
            return cls(max_steps=batch_size, auto_approve=auto_approve)
        return cls(max_steps=None, auto_approve=auto_approve)

    def has_budget(self, steps_run: int) -> bool:
        return self.max_steps is None or steps_run < self.max_steps


def decide_next_step(*, state: WorkflowState, policy: RunPolicy, steps_run: int) -> NextStep:
    """Pick the engine primitive to call next for a run request.

    RUN the current step, APPROVE it so the run can move on, or STOP and
    hand control back to the operator. Pure: reads ``state`` only.
    """

    step = state.current_step
    if step is None or state.is_processing:
        return NextStep.STOP

    if step.status is StepStatus.PAUSED:
        has_next = state.current_step_index + 1 < len(state.steps)
        if policy.auto_approve and has_next and policy.has_budget(steps_run):
            return NextStep.APPROVE
        return NextStep.STOP

    if step.status is StepStatus.ERROR:
        # Retry is an operator action: only the first step of a request may re-run a failure.
        return NextStep.RUN if steps_run == 0 else NextStep.STOP

    if step.status is StepStatus.PENDING and policy.has_budget(steps_run):
        return NextStep.RUN

    return NextStep.STOP
