from __future__ import annotations


class WorkflowError(Exception):
    """Base class for operator-facing workflow errors."""


class IllegalTransitionError(WorkflowError, ValueError):
    pass


class WorkflowBusyError(WorkflowError):
    """A provider call is in flight; the request was rejected, not queued."""

    def __init__(self, message: str = "A step is already running. Wait for it to finish.") -> None:
        super().__init__(message)


class ResetNotConfirmedError(WorkflowError):
    """Reset is destructive and needs explicit confirmation."""

    def __init__(self) -> None:
        super().__init__("Reset requires explicit confirmation.")
