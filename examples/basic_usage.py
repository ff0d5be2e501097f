#!/usr/bin/env python3
"""Programmatic workflow example.

This drives the execution engine directly instead of going through the CLI:

* load settings from `.env`
* restore (or start) the saved session
* run the current step, print the result, and approve it
* save the session again

Pass ``--model`` to pick a provider; the simulated local model needs no API key.
"""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from nexus_flow.core.config import NexusFlowConfig
from nexus_flow.llm.factory import LLMFactory
from nexus_flow.state.manager import StateManager
from nexus_flow.workflow.defaults import default_state
from nexus_flow.workflow.engine import ExecutionEngine
from nexus_flow.workflow.models import StepStatus


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run and approve one workflow step.")
    parser.add_argument("--model", default="llama-3-70b-instruct", help="Model identifier to use")
    parser.add_argument("--feedback", default="", help="Feedback applied to the current step")
    parser.add_argument("--no-approve", action="store_true", help="Leave the step paused for review")
    return parser.parse_args(argv)


async def _run(engine: ExecutionEngine, *, approve: bool) -> int:
    index = engine.state.current_step_index
    step = await engine.run_step(index)

    print(f"Step {index + 1}: {step.title} -> {step.status.value}")
    if step.status is StepStatus.ERROR:
        print(f"Error: {step.error}")
        return 1

    print(step.result)
    if approve:
        engine.approve_and_advance()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = NexusFlowConfig()
    config.setup_logging()

    registry = LLMFactory.create_registry(config.llm)
    manager = StateManager(config.state)
    state = manager.load(lambda: default_state(config.workflow), known_models=set(registry.ids()))

    engine = ExecutionEngine(registry, state, config.workflow)
    engine.select_model(args.model)
    if args.feedback:
        engine.set_feedback(engine.state.current_step_index, args.feedback)

    if engine.state.is_complete:
        print("All steps have been completed. Reset the workflow to start over.")
        return 0

    code = asyncio.run(_run(engine, approve=not args.no_approve))
    manager.save(engine.state)
    print(f"Saved session to: {config.state.state_file}")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
