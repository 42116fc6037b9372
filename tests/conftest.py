"""Test configuration and fixtures."""

import logging
from pathlib import Path

import pytest

from agent_workflow.agent import MockAgent
from agent_workflow.core.config import (
    AgentConfig,
    ExecutorConfig,
    StoreConfig,
    WorkflowConfig,
)
from agent_workflow.store import InMemoryWorkflowStore
from agent_workflow.workflow import ActionRunner


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    """Provide a temporary state directory."""
    state_dir = tmp_path / ".workflow_state"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def store() -> InMemoryWorkflowStore:
    return InMemoryWorkflowStore()


@pytest.fixture
def agent() -> MockAgent:
    return MockAgent()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def runner(sleep: RecordingSleep) -> ActionRunner:
    return ActionRunner(sleep=sleep)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_config(temp_state_dir: Path) -> StoreConfig:
    """Provide a test store configuration."""
    return StoreConfig(
        backend="filesystem",
        storage_path=temp_state_dir,
    )


@pytest.fixture
def workflow_config(store_config: StoreConfig) -> WorkflowConfig:
    """Provide a test workflow configuration."""
    return WorkflowConfig(
        log_level="DEBUG",
        debug=True,
        store=store_config,
        executor=ExecutorConfig(max_iterations=10, max_execution_time=5.0),
        agent=AgentConfig(provider="mock"),
    )


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo root logger changes made by configure_logging."""
    root = logging.getLogger()
    package = logging.getLogger("agent_workflow")
    handlers, level, package_level = list(root.handlers), root.level, package.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    package.setLevel(package_level)
