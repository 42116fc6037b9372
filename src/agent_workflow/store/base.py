"""Abstract persistence contract for workflow states."""

from abc import ABC, abstractmethod

from agent_workflow.workflow.state import WorkflowState


class WorkflowStore(ABC):
    """Durable keyed persistence for :class:`WorkflowState`.

    Implementations are selected per executor instance (in-memory,
    filesystem, Redis).
    """

    @abstractmethod
    def save(self, state: WorkflowState) -> None:
        """Insert or replace the state stored under ``state.id``."""

    @abstractmethod
    def load(self, workflow_id: str) -> WorkflowState | None:
        """Return the stored state, or None if nothing is stored for the id."""

    @abstractmethod
    def remove(self, workflow_id: str) -> None:
        """Delete the stored state. Removing a missing id is a no-op."""
