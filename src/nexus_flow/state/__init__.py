"""Snapshot persistence for workflow sessions."""

from nexus_flow.state.manager import PersistenceError, StateManager

__all__ = ["PersistenceError", "StateManager"]
