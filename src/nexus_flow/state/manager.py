"""State management for the persisted workflow snapshot."""

import contextlib
import json
import logging
from collections.abc import Callable

from nexus_flow.core.config import StateConfig
from nexus_flow.workflow.models import WorkflowState
from nexus_flow.workflow.state_machine import recover

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class PersistenceError(Exception):
    """Loading or saving the snapshot failed. Always recoverable."""


class StateManager:
    """Manager for persisting and loading the workflow snapshot.

    Loading never raises: a missing, unreadable or invalid snapshot yields the
    default state. Saving raises :class:`PersistenceError` so the caller can
    report it without blocking the workflow.
    """

    def __init__(self, config: StateConfig) -> None:
        """Initialize the state manager.

        Args:
            config: State configuration.
        """
        self.config = config
        self.storage_path = config.storage_path
        self.state_file = config.state_file

    def load(
        self,
        default: Callable[[], WorkflowState],
        known_models: set[str] | None = None,
    ) -> WorkflowState:
        """Load the snapshot, falling back to ``default()`` on any problem.

        Args:
            default: Factory for the fresh-session state.
            known_models: Registered model identifiers. When given, a snapshot
                selecting any other model is rejected.

        Returns:
            Loaded (and recovered) state, or the default state.
        """
        if not self.state_file.exists():
            logger.info("No existing state found, starting fresh")
            return default()

        try:
            logger.info(f"Loading state from: {self.state_file}")
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
            state = WorkflowState.from_snapshot(data)
        except Exception as e:
            logger.error(f"Failed to load state: {e}")
            logger.warning("Using fresh state")
            return default()

        if known_models is not None and state.selected_model.value not in known_models:
            logger.warning(
                "Saved state selects an unregistered model, using fresh state",
                extra={"selected_model": state.selected_model.value},
            )
            return default()

        state = recover(state)
        logger.info(
            f"State loaded: {len(state.steps)} steps, "
            f"current step {state.current_step_index}, {len(state.history)} log entries"
        )
        return state

    def save(self, state: WorkflowState) -> None:
        """Write the snapshot atomically.

        Raises:
            PersistenceError: If the snapshot could not be written.
        """
        tmp_file = self.state_file.with_suffix(self.state_file.suffix + ".tmp")
        try:
            payload = {"version": SNAPSHOT_VERSION, **state.to_snapshot()}
            self.storage_path.mkdir(parents=True, exist_ok=True)
            tmp_file.write_text(
                json.dumps(payload, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            tmp_file.replace(self.state_file)
        except Exception as e:
            logger.error(f"Failed to save state: {e}")
            with contextlib.suppress(OSError):
                tmp_file.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to save state to {self.state_file}: {e}") from e

        logger.debug(f"State saved to: {self.state_file}")
