"""NexusFlow.

A human-in-the-loop workflow runner:
- linear steps dispatched to pluggable LLM providers
- a mandatory review pause after every successful step
- configuration loaded from `.env`
- structured logging and a local JSON session snapshot
"""

__version__ = "0.1.0"

from nexus_flow.core.config import NexusFlowConfig

__all__ = ["__version__", "NexusFlowConfig"]
