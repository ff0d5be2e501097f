"""Workflow state models.

All models are frozen. State changes are expressed as whole-state
replacement by :mod:`nexus_flow.workflow.state_machine`; callers never see a
partially updated step.

The JSON form uses camelCase keys (``currentStepIndex``, ``modelUsed``...)
matching the storage format of the browser client.
"""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from nexus_flow.core.models import ExecutionMode, ModelId

LogLevel = Literal["info", "success", "warn", "error"]


def now_ms() -> int:
    return int(time.time() * 1000)


class StepStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class WorkflowStep(_FrozenModel):
    """One prompt/response unit of the workflow."""

    id: str = Field(min_length=1)
    title: str
    prompt: str
    status: StepStatus = StepStatus.PENDING

    result: str | None = None
    error: str | None = None
    feedback: str | None = None
    model_used: ModelId | None = None

    # Observability only; never read by control flow.
    timestamp: int | None = None
    latency: int | None = None


class LogEntry(_FrozenModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = Field(default_factory=now_ms)
    level: LogLevel = "info"
    message: str
    details: str | None = None


class WorkflowState(_FrozenModel):
    """Aggregate root for one session."""

    steps: tuple[WorkflowStep, ...]
    current_step_index: int = Field(default=0, ge=0)
    selected_model: ModelId = ModelId.GEMINI_3
    execution_mode: ExecutionMode = ExecutionMode.STEP
    is_processing: bool = False
    history: tuple[LogEntry, ...] = ()

    @model_validator(mode="after")
    def _check_steps(self) -> WorkflowState:
        if not self.steps:
            raise ValueError("workflow must define at least one step")
        ids = [step.id for step in self.steps]
        if len(set(ids)) != len(ids):
            raise ValueError("step ids must be unique")
        if self.current_step_index > len(self.steps):
            raise ValueError(
                f"currentStepIndex {self.current_step_index} is beyond {len(self.steps)} steps"
            )
        return self

    @property
    def is_complete(self) -> bool:
        return self.current_step_index >= len(self.steps)

    @property
    def current_step(self) -> WorkflowStep | None:
        if self.is_complete:
            return None
        return self.steps[self.current_step_index]

    def index_of(self, step_id: str) -> int:
        for idx, step in enumerate(self.steps):
            if step.id == step_id:
                return idx
        raise KeyError(step_id)

    def to_snapshot(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_snapshot(cls, data: object) -> WorkflowState:
        return cls.model_validate(data)
