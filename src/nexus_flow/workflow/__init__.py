"""Explicit workflow domain concepts.

This package introduces first-class types for:
- Steps, log entries and the session state (``models``)
- Events and the pure transitions over them (``events``, ``state_machine``)
- Execution-mode policy (``policy``)
- The engine that dispatches steps to providers (``engine``)

Control flow is deterministic: only the provider call suspends.
"""

from nexus_flow.workflow.engine import ExecutionEngine, RunReport
from nexus_flow.workflow.errors import (
    IllegalTransitionError,
    ResetNotConfirmedError,
    WorkflowBusyError,
)
from nexus_flow.workflow.models import LogEntry, StepStatus, WorkflowState, WorkflowStep

__all__ = [
    "ExecutionEngine",
    "IllegalTransitionError",
    "LogEntry",
    "ResetNotConfirmedError",
    "RunReport",
    "StepStatus",
    "WorkflowBusyError",
    "WorkflowState",
    "WorkflowStep",
]
