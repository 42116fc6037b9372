"""JSON-file backed workflow store.

One file per workflow id. Writes are serialized within the process only;
use the Redis store when several processes share state.
"""

from __future__ import annotations

import json
import logging
import shutil
import threading
from pathlib import Path
from urllib.parse import quote, unquote

from agent_workflow.store.base import WorkflowStore
from agent_workflow.workflow.state import WorkflowState

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class FilesystemWorkflowStore(WorkflowStore):
    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._lock = threading.Lock()

    def setup(self) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)

    def drop(self) -> None:
        if self._directory.exists():
            logger.warning(f"Removing workflow state directory: {self._directory}")
            shutil.rmtree(self._directory)

    def _path(self, workflow_id: str) -> Path:
        # Percent-encode so ids can never escape the directory.
        return self._directory / f"{quote(workflow_id, safe='')}{_SUFFIX}"

    def save(self, state: WorkflowState) -> None:
        path = self._path(state.id)
        payload = json.dumps(state.to_json(), indent=2, ensure_ascii=False) + "\n"
        with self._lock:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(path.name + ".tmp")
            tmp.write_text(payload, encoding="utf-8")
            tmp.replace(path)

    def load(self, workflow_id: str) -> WorkflowState | None:
        path = self._path(workflow_id)
        with self._lock:
            if not path.exists():
                return None
            raw = json.loads(path.read_text(encoding="utf-8"))
        return WorkflowState.from_json(raw)

    def remove(self, workflow_id: str) -> None:
        with self._lock:
            self._path(workflow_id).unlink(missing_ok=True)

    def ids(self) -> list[str]:
        if not self._directory.exists():
            return []
        return sorted(unquote(p.name[: -len(_SUFFIX)]) for p in self._directory.glob(f"*{_SUFFIX}"))
