"""Redis-backed workflow store with per-key write locking and expiry.

Keys:
    <prefix>state:<id>  serialized state, expires after ``ttl`` seconds
    <prefix>lock:<id>   held for the duration of a save, expires after
                        ``lock_timeout`` seconds
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis

from agent_workflow.store.base import WorkflowStore
from agent_workflow.workflow.errors import LockAcquisitionError
from agent_workflow.workflow.state import WorkflowState

logger = logging.getLogger(__name__)


class RedisWorkflowStore(WorkflowStore):
    def __init__(
        self,
        client: Any,
        *,
        ttl: int = 3600,
        prefix: str = "workflow:",
        lock_timeout: int = 10,
    ) -> None:
        self._client = client
        self._ttl = ttl
        self._prefix = prefix
        self._lock_timeout = lock_timeout

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        ttl: int = 3600,
        prefix: str = "workflow:",
        lock_timeout: int = 10,
    ) -> RedisWorkflowStore:
        client = redis.Redis.from_url(
            url,
            socket_connect_timeout=2,
            socket_timeout=2,
            decode_responses=True,
        )
        logger.info("Redis workflow store configured", extra={"prefix": prefix})
        return cls(client, ttl=ttl, prefix=prefix, lock_timeout=lock_timeout)

    # Separate namespaces so no workflow id can address another id's lock.
    def _key(self, workflow_id: str) -> str:
        return f"{self._prefix}state:{workflow_id}"

    def _lock_key(self, workflow_id: str) -> str:
        return f"{self._prefix}lock:{workflow_id}"

    def save(self, state: WorkflowState) -> None:
        key = self._key(state.id)
        lock_key = self._lock_key(state.id)

        if not self._client.set(lock_key, "1", nx=True, ex=self._lock_timeout):
            raise LockAcquisitionError(state.id)

        try:
            self._client.setex(key, self._ttl, json.dumps(state.to_json(), ensure_ascii=False))
        finally:
            self._client.delete(lock_key)

    def load(self, workflow_id: str) -> WorkflowState | None:
        data = self._client.get(self._key(workflow_id))
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return WorkflowState.from_json(json.loads(data))

    def remove(self, workflow_id: str) -> None:
        self._client.delete(self._key(workflow_id))
