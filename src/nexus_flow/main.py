"""CLI entrypoint for NexusFlow.

Each invocation restores the saved session, applies one operator action
through the execution engine, and saves the session again.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime

from pydantic import ValidationError

from nexus_flow import __version__
from nexus_flow.core.config import NexusFlowConfig
from nexus_flow.core.models import ExecutionMode
from nexus_flow.llm.errors import ProviderError
from nexus_flow.llm.factory import LLMFactory
from nexus_flow.llm.registry import ProviderRegistry
from nexus_flow.state.manager import PersistenceError, StateManager
from nexus_flow.workflow.defaults import default_state
from nexus_flow.workflow.engine import ExecutionEngine
from nexus_flow.workflow.errors import ResetNotConfirmedError, WorkflowError
from nexus_flow.workflow.metrics import latency_series, render_bars
from nexus_flow.workflow.models import StepStatus, WorkflowState

logger = logging.getLogger(__name__)

_STATUS_MARKERS = {
    StepStatus.PENDING: " ",
    StepStatus.RUNNING: ">",
    StepStatus.PAUSED: "?",
    StepStatus.COMPLETED: "x",
    StepStatus.ERROR: "!",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nexus-flow",
        description="Human-in-the-loop multi-step LLM workflow runner",
    )
    parser.add_argument("--version", action="version", version=f"nexus-flow {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show workflow progress")
    subparsers.add_parser("models", help="List registered model providers")

    select_model = subparsers.add_parser("select-model", help="Choose the model for the next run")
    select_model.add_argument("model_id", help="Model identifier, see 'models'")

    mode = subparsers.add_parser("mode", help="Choose the execution granularity")
    mode.add_argument("mode", choices=[m.value for m in ExecutionMode])

    run = subparsers.add_parser("run", help="Run the current step (or more, per execution mode)")
    run.add_argument(
        "--auto-approve",
        action="store_true",
        help="In batch/all mode, approve each paused step before running the next one",
    )

    subparsers.add_parser("iterate", help="Re-run the current step, applying its feedback")

    feedback = subparsers.add_parser("feedback", help="Set feedback for a step")
    feedback.add_argument("text", help="Feedback text (empty string clears it)")
    feedback.add_argument(
        "--step",
        type=int,
        default=None,
        help="1-based step number (defaults to the current step)",
    )

    subparsers.add_parser("approve", help="Approve the paused step and continue")

    reset = subparsers.add_parser("reset", help="Reset all step progress (logs are kept)")
    reset.add_argument("--yes", action="store_true", help="Confirm the reset")

    logs = subparsers.add_parser("logs", help="Show the session log")
    logs.add_argument("--limit", type=int, default=20, help="Number of entries to show")
    logs.add_argument("--details", action="store_true", help="Include diagnostic details")

    subparsers.add_parser("metrics", help="Show latency of completed steps")

    show = subparsers.add_parser("show", help="Show a step's prompt, result and error")
    show.add_argument("step", type=int, help="1-based step number")

    return parser


def _print_status(state: WorkflowState) -> None:
    running = "Inference Running..." if state.is_processing else "System Ready"
    print(
        f"{running}  model={state.selected_model.value}  mode={state.execution_mode.value}  "
        f"progress={state.current_step_index}/{len(state.steps)}"
    )
    for idx, step in enumerate(state.steps):
        pointer = "*" if idx == state.current_step_index else " "
        model = f" [{step.model_used.value}]" if step.model_used else ""
        print(f"{pointer} [{_STATUS_MARKERS[step.status]}] {idx + 1}. {step.title} ({step.status.value}){model}")


def _print_step(state: WorkflowState, number: int) -> None:
    if not 1 <= number <= len(state.steps):
        raise IndexError(f"Step {number} does not exist (1..{len(state.steps)})")
    step = state.steps[number - 1]
    print(f"{number}. {step.title} ({step.status.value})")
    print(f"Prompt: {step.prompt}")
    if step.feedback:
        print(f"Feedback: {step.feedback}")
    if step.latency is not None:
        print(f"Latency: {step.latency}ms")
    if step.error:
        print(f"\nError: {step.error}")
    if step.result:
        print(f"\n{step.result}")


def _print_models(registry: ProviderRegistry, state: WorkflowState) -> None:
    for provider in registry.providers():
        marker = "*" if provider.id == state.selected_model else " "
        where = "local" if provider.is_local else "remote"
        print(f"{marker} {provider.id.value:<24} {provider.name} ({where}) - {provider.description}")


def _print_logs(state: WorkflowState, limit: int, details: bool) -> None:
    entries = state.history[-limit:] if limit > 0 else state.history
    if not entries:
        print("System ready. Logs will appear here.")
    for entry in entries:
        when = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%H:%M:%S")
        print(f"{when} [{entry.level.upper()}] {entry.message}")
        if details and entry.details:
            print(entry.details)


async def _run_command(args: argparse.Namespace, engine: ExecutionEngine) -> int:
    if args.command == "run":
        report = await engine.run(auto_approve=args.auto_approve)
        _print_status(engine.state)
        for index in report.executed:
            _print_step(engine.state, index + 1)
        # Exit code 4: a step ended in ERROR.
        return 4 if report.failed else 0

    if args.command == "iterate":
        state = engine.state
        if state.is_complete:
            raise WorkflowError("All steps have been completed. Reset workflow to start over.")
        step = await engine.run_step(state.current_step_index)
        _print_step(engine.state, state.current_step_index + 1)
        return 4 if step.status is StepStatus.ERROR else 0

    raise ValueError(f"Unknown async command: {args.command}")


def _execute(args: argparse.Namespace, engine: ExecutionEngine) -> int:
    state = engine.state

    if args.command == "status":
        _print_status(state)
        return 0

    if args.command == "models":
        _print_models(engine.registry, state)
        return 0

    if args.command == "select-model":
        engine.select_model(args.model_id)
        print(f"Selected model: {engine.state.selected_model.value}")
        return 0

    if args.command == "mode":
        engine.select_mode(args.mode)
        print(f"Execution mode: {engine.state.execution_mode.value}")
        return 0

    if args.command in {"run", "iterate"}:
        return asyncio.run(_run_command(args, engine))

    if args.command == "feedback":
        index = state.current_step_index if args.step is None else args.step - 1
        engine.set_feedback(index, args.text)
        print(f"Feedback {'cleared' if not args.text else 'saved'} for step {index + 1}")
        return 0

    if args.command == "approve":
        engine.approve_and_advance()
        _print_status(engine.state)
        return 0

    if args.command == "reset":
        if not args.yes:
            print("Reset workflow? History will be preserved in logs. Re-run with --yes to confirm.")
        engine.reset_workflow(confirm=args.yes)
        print("Workflow reset.")
        return 0

    if args.command == "logs":
        _print_logs(state, args.limit, args.details)
        return 0

    if args.command == "metrics":
        lines = render_bars(latency_series(state.steps))
        print("\n".join(lines) if lines else "No completed steps with latency yet.")
        return 0

    if args.command == "show":
        _print_step(state, args.step)
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = NexusFlowConfig()
    except ValidationError as e:
        # Logging is not configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    config.setup_logging()

    registry = LLMFactory.create_registry(config.llm)
    manager = StateManager(config.state)
    state = manager.load(lambda: default_state(config.workflow), known_models=set(registry.ids()))
    engine = ExecutionEngine(registry, state, config.workflow)

    try:
        code = _execute(args, engine)
    except ResetNotConfirmedError:
        code = 1
    except (WorkflowError, ProviderError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1

    try:
        manager.save(engine.state)
    except PersistenceError as e:
        # Progress was already printed; only the snapshot is lost.
        print(f"Warning: {e}", file=sys.stderr)

    return code


if __name__ == "__main__":
    raise SystemExit(main())
