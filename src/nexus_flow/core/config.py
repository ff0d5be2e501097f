"""Core configuration for NexusFlow."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nexus_flow.core.models import ExecutionMode, ModelId
from nexus_flow.logging import configure_logging

DEFAULT_SYSTEM_INSTRUCTION = (
    "You are an advanced AI workflow assistant. Execute the user's request precisely. "
    "Maintain technical accuracy."
)


class LLMConfig(BaseSettings):
    """Configuration for LLM providers.

    API keys are read from the process environment (or `.env`) and are never
    written to the workflow snapshot.
    """

    # Gemini settings
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "GEMINI_API_KEY"),
        description="Google GenAI API key",
    )
    gemini_model: str = Field(
        default="gemini-3-pro-preview",
        description="Gemini model to call",
    )
    gemini_thinking_budget: int = Field(
        default=1024,
        ge=0,
        description="Thinking token budget for Gemini reasoning",
    )

    # OpenAI settings
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("openai_api_key", "OPENAI_API_KEY"),
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )

    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Per-request timeout for remote providers",
    )

    # Simulated providers
    simulated_local_latency_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Artificial delay for simulated local runners",
    )
    simulated_cloud_latency_seconds: float = Field(
        default=1.5,
        ge=0.0,
        description="Artificial delay for simulated cloud APIs",
    )

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_FLOW_LLM_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


class StateConfig(BaseSettings):
    """Configuration for snapshot persistence."""

    storage_path: Path = Field(
        default=Path(".nexus_flow"),
        description="Directory holding the workflow snapshot",
    )
    filename: str = Field(
        default="state.json",
        description="Snapshot file name inside storage_path",
    )

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_FLOW_STATE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def state_file(self) -> Path:
        return self.storage_path / self.filename


class WorkflowConfig(BaseSettings):
    """Configuration for the execution engine."""

    default_model: ModelId = Field(
        default=ModelId.GEMINI_3,
        description="Model selected for a fresh session",
    )
    default_execution_mode: ExecutionMode = Field(
        default=ExecutionMode.STEP,
        description="Execution granularity for a fresh session",
    )
    batch_size: int = Field(
        default=3,
        ge=1,
        description="Number of steps a 'batch' run attempts before pausing",
    )
    dispatch_timeout_seconds: float = Field(
        default=90.0,
        gt=0,
        description="Outer deadline the engine enforces around every provider call",
    )
    system_instruction: str = Field(
        default=DEFAULT_SYSTEM_INSTRUCTION,
        description="System instruction sent with every step",
    )
    history_limit: int = Field(
        default=500,
        ge=1,
        description="Maximum number of log entries kept in the workflow history",
    )
    feedback_max_chars: int = Field(
        default=2000,
        ge=1,
        description="Operator feedback is truncated to this many characters",
    )

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_FLOW_WORKFLOW_",
        env_file=".env",
        extra="ignore",
    )


class NexusFlowConfig(BaseSettings):
    """Main configuration for NexusFlow."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Structured JSON logs or plain text",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    llm: LLMConfig = Field(
        default_factory=LLMConfig,
        description="LLM configuration",
    )
    state: StateConfig = Field(
        default_factory=StateConfig,
        description="State configuration",
    )
    workflow: WorkflowConfig = Field(
        default_factory=WorkflowConfig,
        description="Workflow engine configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_FLOW_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level, json_format=self.log_format == "json")

        if self.debug:
            logging.getLogger("nexus_flow").setLevel(logging.DEBUG)
