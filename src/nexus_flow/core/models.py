"""Identifiers shared by configuration, providers and workflow state."""

from __future__ import annotations

from enum import Enum


class ModelId(str, Enum):
    """Closed set of model identifiers the workflow can dispatch to."""

    GEMINI_3 = "gemini-3-pro-preview"
    GPT_4O = "gpt-4o"
    CLAUDE_3 = "claude-3-opus"
    LLAMA_3 = "llama-3-70b-instruct"
    HF_TRANSFORMERS = "hf-transformers-latest"


class ExecutionMode(str, Enum):
    """How many steps a single run request may execute before pausing."""

    STEP = "step"
    BATCH = "batch"
    ALL = "all"
