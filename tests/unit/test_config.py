"""Unit tests for configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nexus_flow.core.config import (
    DEFAULT_SYSTEM_INSTRUCTION,
    LLMConfig,
    NexusFlowConfig,
    StateConfig,
    WorkflowConfig,
)
from nexus_flow.core.models import ExecutionMode, ModelId


def test_llm_config_defaults() -> None:
    """Test LLM config default values."""
    config = LLMConfig()

    assert config.gemini_api_key is None
    assert config.openai_api_key is None
    assert config.openai_model == "gpt-4o"
    assert config.openai_temperature == 0.7
    assert config.timeout_seconds == 60.0
    assert config.simulated_local_latency_seconds == 0.5
    assert config.simulated_cloud_latency_seconds == 1.5


def test_llm_config_reads_plain_api_key_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("OPENAI_API_KEY", "o-key")

    config = LLMConfig()

    assert config.gemini_api_key == "g-key"
    assert config.openai_api_key == "o-key"


def test_state_config_defaults() -> None:
    """Test state config default values."""
    config = StateConfig()

    assert config.storage_path == Path(".nexus_flow")
    assert config.state_file == Path(".nexus_flow") / "state.json"


def test_workflow_config_defaults() -> None:
    config = WorkflowConfig()

    assert config.default_model is ModelId.GEMINI_3
    assert config.default_execution_mode is ExecutionMode.STEP
    assert config.history_limit == 500
    assert config.feedback_max_chars == 2000
    assert config.system_instruction == DEFAULT_SYSTEM_INSTRUCTION


def test_workflow_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXUS_FLOW_WORKFLOW_DEFAULT_MODEL", "claude-3-opus")
    monkeypatch.setenv("NEXUS_FLOW_WORKFLOW_BATCH_SIZE", "2")

    config = WorkflowConfig()

    assert config.default_model is ModelId.CLAUDE_3
    assert config.batch_size == 2


def test_workflow_config_rejects_unknown_model(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXUS_FLOW_WORKFLOW_DEFAULT_MODEL", "gpt-2")

    with pytest.raises(ValidationError):
        WorkflowConfig()


def test_nexus_flow_config_composition() -> None:
    """Test top-level config with nested configs."""
    config = NexusFlowConfig(
        log_level="DEBUG",
        debug=True,
    )

    assert config.log_level == "DEBUG"
    assert config.debug is True
    assert config.log_format == "json"
    assert isinstance(config.llm, LLMConfig)
    assert isinstance(config.state, StateConfig)
    assert isinstance(config.workflow, WorkflowConfig)
