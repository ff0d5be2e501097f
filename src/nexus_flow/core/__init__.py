"""Core package initialization."""

from nexus_flow.core.config import NexusFlowConfig
from nexus_flow.core.models import ExecutionMode, ModelId

__all__ = [
    "ExecutionMode",
    "ModelId",
    "NexusFlowConfig",
]
