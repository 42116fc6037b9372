"""Unit tests for workflow state stores."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from agent_workflow.core.config import StoreConfig
from agent_workflow.store import (
    FilesystemWorkflowStore,
    InMemoryWorkflowStore,
    RedisWorkflowStore,
    WorkflowStoreFactory,
)
from agent_workflow.workflow import (
    ConfigurationError,
    LockAcquisitionError,
    WorkflowError,
    WorkflowState,
    WorkflowStatus,
)


def _state() -> WorkflowState:
    state = WorkflowState(
        "job-456",
        context={"__marking": {"validating": 1}, "dataset": "customers-2024"},
        status=WorkflowStatus.FAILED,
    )
    state.add_error(WorkflowError("Validation failed", "validating", code="action_failed"))
    return state


def test_memory_store_roundtrip() -> None:
    store = InMemoryWorkflowStore()
    assert store.load("job-456") is None

    state = _state()
    store.save(state)
    loaded = store.load("job-456")

    assert loaded == state
    assert loaded is not state


def test_memory_store_returns_snapshots() -> None:
    store = InMemoryWorkflowStore()
    state = _state()
    store.save(state)

    state.merge_context({"dataset": "changed"})

    loaded = store.load("job-456")
    assert loaded is not None
    assert loaded.context["dataset"] == "customers-2024"


def test_memory_store_remove() -> None:
    store = InMemoryWorkflowStore()
    store.save(_state())
    store.remove("job-456")
    store.remove("job-456")

    assert store.load("job-456") is None
    assert store.ids() == []


def test_filesystem_store_roundtrip(tmp_path: Path) -> None:
    store = FilesystemWorkflowStore(tmp_path / "workflow_states")
    store.setup()
    assert store.load("job-456") is None

    state = _state()
    store.save(state)

    assert store.load("job-456") == state
    assert store.ids() == ["job-456"]


def test_filesystem_store_writes_json(tmp_path: Path) -> None:
    store = FilesystemWorkflowStore(tmp_path)
    store.save(_state())

    raw = json.loads((tmp_path / "job-456.json").read_text(encoding="utf-8"))
    assert raw["status"] == "failed"
    assert raw["context"]["__marking"] == {"validating": 1}
    assert raw["errors"][0]["place"] == "validating"


def test_filesystem_store_encodes_ids(tmp_path: Path) -> None:
    store = FilesystemWorkflowStore(tmp_path / "states")
    store.save(WorkflowState("reports/../escape"))

    assert not (tmp_path / "escape").exists()
    assert store.ids() == ["reports/../escape"]
    assert store.load("reports/../escape") == WorkflowState("reports/../escape")


def test_filesystem_store_remove_and_drop(tmp_path: Path) -> None:
    directory = tmp_path / "states"
    store = FilesystemWorkflowStore(directory)
    store.setup()
    store.save(_state())

    store.remove("job-456")
    store.remove("job-456")
    assert store.load("job-456") is None

    store.drop()
    assert not directory.exists()


def test_redis_store_save_locks_writes_and_releases() -> None:
    client = Mock()
    client.set.return_value = True
    store = RedisWorkflowStore(client, ttl=60, prefix="wf:", lock_timeout=5)

    store.save(_state())

    client.set.assert_called_once_with("wf:lock:job-456", "1", nx=True, ex=5)
    key, ttl, payload = client.setex.call_args.args
    assert key == "wf:state:job-456"
    assert ttl == 60
    assert json.loads(payload)["id"] == "job-456"
    client.delete.assert_called_once_with("wf:lock:job-456")


def test_redis_store_fails_when_lock_is_held() -> None:
    client = Mock()
    client.set.return_value = None
    store = RedisWorkflowStore(client)

    with pytest.raises(LockAcquisitionError):
        store.save(_state())

    client.setex.assert_not_called()
    client.delete.assert_not_called()


def test_redis_store_releases_lock_when_write_fails() -> None:
    client = Mock()
    client.set.return_value = True
    client.setex.side_effect = ConnectionError("redis down")
    store = RedisWorkflowStore(client)

    with pytest.raises(ConnectionError):
        store.save(_state())

    client.delete.assert_called_once_with("workflow:lock:job-456")


def test_redis_store_load_and_remove() -> None:
    client = Mock()
    state = _state()
    client.get.return_value = json.dumps(state.to_json()).encode("utf-8")
    store = RedisWorkflowStore(client)

    assert store.load("job-456") == state
    client.get.assert_called_once_with("workflow:state:job-456")

    client.get.return_value = None
    assert store.load("missing") is None

    store.remove("job-456")
    client.delete.assert_called_once_with("workflow:state:job-456")


class DictRedis:
    """Minimal Redis stand-in keeping string values in a dict."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def set(self, key: str, value: str, nx: bool = False, ex: int | None = None) -> bool | None:
        if nx and key in self.data:
            return None
        self.data[key] = value
        return True

    def setex(self, key: str, ttl: int, value: str) -> None:
        self.data[key] = value

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


def test_redis_store_ids_cannot_collide_with_lock_keys() -> None:
    client = DictRedis()
    store = RedisWorkflowStore(client)

    store.save(WorkflowState("job:lock", status=WorkflowStatus.FAILED))
    store.save(WorkflowState("job"))
    store.save(WorkflowState("job"))

    lock_holder = store.load("job:lock")
    assert lock_holder is not None
    assert lock_holder.status == WorkflowStatus.FAILED
    assert store.load("job") == WorkflowState("job")
    assert not any(key.startswith("workflow:lock:") for key in client.data)


def test_factory_creates_configured_backends(tmp_path: Path) -> None:
    assert isinstance(
        WorkflowStoreFactory.create(StoreConfig(backend="memory")), InMemoryWorkflowStore
    )

    fs = WorkflowStoreFactory.create(
        StoreConfig(backend="filesystem", storage_path=tmp_path / "fs")
    )
    assert isinstance(fs, FilesystemWorkflowStore)
    assert (tmp_path / "fs").is_dir()

    with patch("redis.Redis.from_url") as from_url:
        rs = WorkflowStoreFactory.create(
            StoreConfig(backend="redis", redis_url="redis://cache:6379/1", ttl=120)
        )
    assert isinstance(rs, RedisWorkflowStore)
    assert from_url.call_args.args == ("redis://cache:6379/1",)


def test_factory_rejects_unsupported_backend() -> None:
    config = StoreConfig.model_construct(backend="sqlite")

    with pytest.raises(ConfigurationError):
        WorkflowStoreFactory.create(config)
