"""Events consumed by :func:`nexus_flow.workflow.state_machine.apply`.

Each event carries exactly the values its transition writes. Events are
values: building one never touches the state.
"""

from __future__ import annotations

from dataclasses import dataclass

from nexus_flow.core.models import ExecutionMode, ModelId
from nexus_flow.workflow.models import LogEntry


@dataclass(frozen=True, slots=True)
class StepStarted:
    index: int
    model_id: ModelId
    timestamp: int


@dataclass(frozen=True, slots=True)
class StepSucceeded:
    step_id: str
    result: str
    latency: int


@dataclass(frozen=True, slots=True)
class StepFailed:
    step_id: str
    error: str


@dataclass(frozen=True, slots=True)
class ProcessingFinished:
    pass


@dataclass(frozen=True, slots=True)
class StepApproved:
    pass


@dataclass(frozen=True, slots=True)
class WorkflowReset:
    pass


@dataclass(frozen=True, slots=True)
class ModelSelected:
    model_id: ModelId


@dataclass(frozen=True, slots=True)
class ModeSelected:
    mode: ExecutionMode


@dataclass(frozen=True, slots=True)
class FeedbackEdited:
    index: int
    feedback: str | None


@dataclass(frozen=True, slots=True)
class LogAppended:
    entry: LogEntry
    limit: int = 500


WorkflowEvent = (
    StepStarted
    | StepSucceeded
    | StepFailed
    | ProcessingFinished
    | StepApproved
    | WorkflowReset
    | ModelSelected
    | ModeSelected
    | FeedbackEdited
    | LogAppended
)
