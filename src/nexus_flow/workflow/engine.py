"""Execution engine: drives the step state machine against the providers.

The engine owns the single :class:`WorkflowState` for a session. Every change
goes through :func:`~nexus_flow.workflow.state_machine.apply`, and the only
suspension point is the provider call inside :meth:`ExecutionEngine.run_step`.
"""

from __future__ import annotations

import asyncio
import logging
import time
import traceback
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from nexus_flow.core.config import WorkflowConfig
from nexus_flow.core.models import ExecutionMode, ModelId
from nexus_flow.llm.errors import ProviderError, ProviderTimeoutError, UnknownProviderError
from nexus_flow.llm.registry import ProviderRegistry
from nexus_flow.workflow.context import build_context, build_prompt, sanitize_feedback
from nexus_flow.workflow.errors import (
    ResetNotConfirmedError,
    WorkflowBusyError,
)
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
from nexus_flow.workflow.models import LogEntry, LogLevel, StepStatus, WorkflowState, WorkflowStep, now_ms
from nexus_flow.workflow.policy import NextStep, RunPolicy, decide_next_step
from nexus_flow.workflow.state_machine import apply, check_transition

logger = logging.getLogger(__name__)

_LOG_LEVELS: dict[str, int] = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

StateListener = Callable[[WorkflowState], None]


@dataclass
class RunReport:
    """What a single :meth:`ExecutionEngine.run` request did."""

    executed: list[int] = field(default_factory=list)
    approved: list[int] = field(default_factory=list)
    stopped_at: int | None = None
    failed: bool = False


class ExecutionEngine:
    """Single-writer owner of the workflow state."""

    def __init__(
        self,
        registry: ProviderRegistry,
        state: WorkflowState,
        config: WorkflowConfig | None = None,
    ) -> None:
        self._registry = registry
        self._state = state
        self.config = config or WorkflowConfig()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    def subscribe(self, listener: StateListener) -> None:
        """Call ``listener`` with the new state after every transition."""
        self._listeners.append(listener)

    def _apply(self, event: WorkflowEvent) -> WorkflowState:
        self._state = apply(self._state, event)
        for listener in self._listeners:
            listener(self._state)
        return self._state

    def add_log(self, message: str, level: LogLevel = "info", details: str | None = None) -> LogEntry:
        """Append to the operator-facing history and mirror it to the logger."""
        entry = LogEntry(level=level, message=message, details=details)
        self._apply(LogAppended(entry=entry, limit=self.config.history_limit))
        logger.log(_LOG_LEVELS[level], message, extra={"history_level": level})
        return entry

    # Operator actions

    def select_model(self, model_id: ModelId | str) -> None:
        try:
            resolved = ModelId(model_id)
        except ValueError as e:
            raise UnknownProviderError(str(model_id)) from e
        self._registry.resolve(resolved)
        self._apply(ModelSelected(model_id=resolved))
        self.add_log(f"Selected model {resolved.value}")

    def select_mode(self, mode: ExecutionMode | str) -> None:
        resolved = ExecutionMode(mode)
        self._apply(ModeSelected(mode=resolved))
        self.add_log(f"Execution mode set to {resolved.value}")

    def set_feedback(self, index: int, feedback: str | None) -> None:
        """Store operator feedback as typed. It is sanitised when a run uses it."""
        self._apply(FeedbackEdited(index=index, feedback=feedback or None))

    # Step primitives

    async def run_step(self, index: int) -> WorkflowStep:
        """Run one step and reconcile the outcome into the state.

        Provider failures never escape: they land in the step's ``error``
        field and the history. The call itself raises only for caller errors
        (busy, bad index, illegal transition, unknown model), before any
        state has changed.

        Raises:
            WorkflowBusyError: Another step is in flight.
            IndexError: ``index`` is out of range.
            IllegalTransitionError: The step cannot be run from its status.
            UnknownProviderError: The selected model has no provider.
        """
        snapshot = self._state
        if snapshot.is_processing:
            raise WorkflowBusyError()
        if not 0 <= index < len(snapshot.steps):
            raise IndexError(f"Step index {index} is out of range (0..{len(snapshot.steps) - 1})")

        step = snapshot.steps[index]
        check_transition(step.status, StepStatus.RUNNING)

        model_id = snapshot.selected_model
        try:
            provider = self._registry.resolve(model_id)
        except UnknownProviderError as e:
            self.add_log(f"Error in Step {index + 1}: {e}", "error", details=type(e).__name__)
            raise

        context = build_context(snapshot.steps, index)
        prompt = build_prompt(step, self.config.feedback_max_chars)

        self._apply(StepStarted(index=index, model_id=model_id, timestamp=now_ms()))
        self.add_log(f"Starting Step {index + 1}: {step.title}")
        if sanitize_feedback(step.feedback, self.config.feedback_max_chars) is not None:
            self.add_log("Applied user feedback to prompt")

        started = time.perf_counter()
        try:
            result = await self._dispatch(provider.generate(prompt, self.config.system_instruction, context))
        except asyncio.CancelledError:
            self._apply(StepFailed(step_id=step.id, error="Step execution was cancelled."))
            self.add_log(f"Step {index + 1} cancelled", "warn")
            raise
        except Exception as e:
            message = str(e) or "Unknown error occurred"
            self._apply(StepFailed(step_id=step.id, error=message))
            self.add_log(f"Error in Step {index + 1}: {message}", "error", details=_diagnostics(e))
        else:
            latency = round((time.perf_counter() - started) * 1000)
            self._apply(StepSucceeded(step_id=step.id, result=result, latency=latency))
            self.add_log(f"Step {index + 1} execution successful. Latency: {latency}ms", "success")
        finally:
            self._apply(ProcessingFinished())

        return self._state.steps[index]

    async def _dispatch(self, call: Awaitable[str]) -> str:
        timeout = self.config.dispatch_timeout_seconds
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except TimeoutError as e:
            raise ProviderTimeoutError(
                f"Request timeout after {timeout:g} seconds", timeout_seconds=timeout
            ) from e

    async def run_current(self) -> WorkflowStep | None:
        """Run the step at ``current_step_index``; warn when nothing is left."""
        if self._state.is_complete:
            self.add_log("All steps have been completed. Reset workflow to start over.", "warn")
            return None
        return await self.run_step(self._state.current_step_index)

    def approve_and_advance(self) -> WorkflowState:
        """Mark the paused current step COMPLETED and move to the next one.

        Raises:
            WorkflowBusyError: A step is in flight.
            IllegalTransitionError: The current step is not PAUSED.
        """
        if self._state.is_processing:
            raise WorkflowBusyError()
        self._apply(StepApproved())

        next_index = self._state.current_step_index
        if self._state.is_complete:
            self.add_log("Workflow successfully completed! All steps finished.", "success")
        else:
            self.add_log(f"Advanced to Step {next_index + 1}. Ready to execute.")
        return self._state

    def reset_workflow(self, *, confirm: bool) -> WorkflowState:
        """Clear all step progress. History is kept.

        Raises:
            ResetNotConfirmedError: ``confirm`` was not set.
            WorkflowBusyError: A step is in flight.
        """
        if not confirm:
            raise ResetNotConfirmedError()
        if self._state.is_processing:
            raise WorkflowBusyError()
        self._apply(WorkflowReset())
        self.add_log("Workflow reset initiated.", "warn")
        return self._state

    async def run(self, *, auto_approve: bool = False) -> RunReport:
        """Run steps according to the session's execution mode.

        ``step`` runs one step, ``batch`` up to ``batch_size`` steps and
        ``all`` until the end. Without ``auto_approve`` the run stops at the
        first step waiting for review, whatever the mode.
        """
        policy = RunPolicy.for_mode(
            self._state.execution_mode,
            batch_size=self.config.batch_size,
            auto_approve=auto_approve,
        )
        report = RunReport()
        if self._state.is_complete:
            await self.run_current()
            return report

        while True:
            decision = decide_next_step(state=self._state, policy=policy, steps_run=len(report.executed))
            if decision is NextStep.STOP:
                break
            index = self._state.current_step_index
            if decision is NextStep.APPROVE:
                self.approve_and_advance()
                report.approved.append(index)
                continue
            step = await self.run_step(index)
            report.executed.append(index)
            if step.status is StepStatus.ERROR:
                report.failed = True
                break

        if not self._state.is_complete:
            report.stopped_at = self._state.current_step_index
        return report


def _diagnostics(error: BaseException) -> str:
    lines = traceback.format_exception(type(error), error, error.__traceback__)
    if isinstance(error, ProviderError) and error.provider_id:
        lines.insert(0, f"provider={error.provider_id}\n")
    return "".join(lines)

