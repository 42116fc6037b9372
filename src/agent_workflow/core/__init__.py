"""Core package initialization."""

from agent_workflow.core.config import (
    AgentConfig,
    ExecutorConfig,
    StoreConfig,
    WorkflowConfig,
)

__all__ = [
    "AgentConfig",
    "ExecutorConfig",
    "StoreConfig",
    "WorkflowConfig",
]
