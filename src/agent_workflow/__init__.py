"""Agent Workflow.

A place/transition workflow engine for agent pipelines:
- guarded transitions and retryable place-entry actions
- durable state persistence (memory, filesystem, Redis)
- resumable execution after failures
"""

__version__ = "0.1.0"

from agent_workflow.core.config import WorkflowConfig
from agent_workflow.workflow import (
    CallableAction,
    TextResult,
    WorkflowBuilder,
    WorkflowExecutor,
    WorkflowState,
    WorkflowStatus,
)

__all__ = [
    "__version__",
    "CallableAction",
    "TextResult",
    "WorkflowBuilder",
    "WorkflowConfig",
    "WorkflowExecutor",
    "WorkflowState",
    "WorkflowStatus",
]
