from __future__ import annotations

import json
import threading

from agent_workflow.store.base import WorkflowStore
from agent_workflow.workflow.state import WorkflowState


class InMemoryWorkflowStore(WorkflowStore):
    """Process-local store keeping serialized snapshots.

    ``load`` always returns a fresh object, so later mutations of a saved
    state are not visible until it is saved again.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, str] = {}

    def save(self, state: WorkflowState) -> None:
        payload = json.dumps(state.to_json(), ensure_ascii=False)
        with self._lock:
            self._states[state.id] = payload

    def load(self, workflow_id: str) -> WorkflowState | None:
        with self._lock:
            payload = self._states.get(workflow_id)
        if payload is None:
            return None
        return WorkflowState.from_json(json.loads(payload))

    def remove(self, workflow_id: str) -> None:
        with self._lock:
            self._states.pop(workflow_id, None)

    def ids(self) -> list[str]:
        with self._lock:
            return sorted(self._states)
