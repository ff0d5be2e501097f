"""Test configuration and fixtures."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from nexus_flow.core.config import (
    LLMConfig,
    NexusFlowConfig,
    StateConfig,
    WorkflowConfig,
)
from nexus_flow.core.models import ModelId
from nexus_flow.llm.provider import LLMProvider
from nexus_flow.llm.registry import ProviderRegistry
from nexus_flow.workflow.engine import ExecutionEngine
from nexus_flow.workflow.models import WorkflowState, WorkflowStep


class FakeProvider(LLMProvider):
    """Scripted provider that records every call it receives."""

    def __init__(
        self,
        model_id: ModelId = ModelId.LLAMA_3,
        responses: list[str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.id = model_id
        self.name = f"Fake {model_id.value}"
        self.description = "Test double"
        self.is_local = True
        self.responses = list(responses or ["ok"])
        self.error = error
        self.gate: asyncio.Event | None = None
        self.calls: list[tuple[str, str, str]] = []

    async def generate(self, prompt: str, system_instruction: str = "", context: str = "") -> str:
        self.calls.append((prompt, system_instruction, context))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env and API keys out of the tests."""
    for name in ("GEMINI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    state_dir = tmp_path / ".nexus_flow"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def llm_config() -> LLMConfig:
    """Provide a test LLM configuration with instant simulated providers."""
    return LLMConfig(
        gemini_api_key="test-key",
        openai_api_key="test-key",
        timeout_seconds=5.0,
        simulated_local_latency_seconds=0.0,
        simulated_cloud_latency_seconds=0.0,
    )


@pytest.fixture
def state_config(temp_state_dir: Path) -> StateConfig:
    """Provide a test state configuration."""
    return StateConfig(storage_path=temp_state_dir)


@pytest.fixture
def workflow_config() -> WorkflowConfig:
    return WorkflowConfig(default_model=ModelId.LLAMA_3, dispatch_timeout_seconds=5.0)


@pytest.fixture
def nexus_config(
    llm_config: LLMConfig,
    state_config: StateConfig,
    workflow_config: WorkflowConfig,
) -> NexusFlowConfig:
    """Provide a test top-level configuration."""
    return NexusFlowConfig(
        log_level="DEBUG",
        debug=True,
        llm=llm_config,
        state=state_config,
        workflow=workflow_config,
    )


@pytest.fixture
def three_steps() -> tuple[WorkflowStep, ...]:
    return (
        WorkflowStep(id="s0", title="Research", prompt="Research the topic."),
        WorkflowStep(id="s1", title="Draft", prompt="Draft an outline."),
        WorkflowStep(id="s2", title="Review", prompt="Review the outline."),
    )


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def registry(fake_provider: FakeProvider) -> ProviderRegistry:
    return ProviderRegistry([fake_provider])


@pytest.fixture
def engine(
    registry: ProviderRegistry,
    workflow_config: WorkflowConfig,
    three_steps: tuple[WorkflowStep, ...],
) -> ExecutionEngine:
    state = WorkflowState(steps=three_steps, selected_model=ModelId.LLAMA_3)
    return ExecutionEngine(registry, state, workflow_config)
