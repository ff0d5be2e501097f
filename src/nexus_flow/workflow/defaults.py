"""Built-in workflow definition used for a fresh session."""

from __future__ import annotations

from nexus_flow.core.config import WorkflowConfig
from nexus_flow.workflow.models import WorkflowState, WorkflowStep

INITIAL_STEPS: tuple[WorkflowStep, ...] = (
    WorkflowStep(
        id="step-1",
        title="Market Analysis",
        prompt=(
            "Analyze the current trends in AI agent workflows as of late 2025. "
            "Summarize key adoption drivers."
        ),
    ),
    WorkflowStep(
        id="step-2",
        title="Architecture Draft",
        prompt=(
            "Based on the analysis, draft a high-level system architecture for a modular "
            "inference engine using Python."
        ),
    ),
    WorkflowStep(
        id="step-3",
        title="Security Review",
        prompt=(
            "Review the architecture for potential prompt injection vulnerabilities and "
            "suggest mitigation strategies."
        ),
    ),
)


def default_state(config: WorkflowConfig | None = None) -> WorkflowState:
    config = config or WorkflowConfig()
    return WorkflowState(
        steps=INITIAL_STEPS,
        current_step_index=0,
        selected_model=config.default_model,
        execution_mode=config.default_execution_mode,
        is_processing=False,
        history=(),
    )
