"""Workflow state persistence strategies."""

from agent_workflow.store.base import WorkflowStore
from agent_workflow.store.factory import WorkflowStoreFactory
from agent_workflow.store.filesystem import FilesystemWorkflowStore
from agent_workflow.store.memory import InMemoryWorkflowStore
from agent_workflow.store.redis_store import RedisWorkflowStore

__all__ = [
    "FilesystemWorkflowStore",
    "InMemoryWorkflowStore",
    "RedisWorkflowStore",
    "WorkflowStore",
    "WorkflowStoreFactory",
]
