"""Place/transition workflow engine.

Workflows are built once with :class:`WorkflowBuilder` and executed many
times by :class:`WorkflowExecutor`, which fires guarded transitions, runs
place-entry actions with retries and persists every step so a failed run can
be resumed from its last marking.
"""

from .actions import Action, ActionDispatcher, ActionRunner, CallableAction, TextResult
from .definition import BuiltWorkflow, Transition, WorkflowBuilder, WorkflowDefinition
from .errors import (
    ActionFailedError,
    ConfigurationError,
    ExecutionLimitError,
    ExecutionTimeoutError,
    InvalidDefinitionError,
    InvalidResumeError,
    InvalidSubjectError,
    IterationLimitExceeded,
    LockAcquisitionError,
    WorkflowNotFoundError,
    WorkflowRuntimeError,
    WorkflowStoreError,
)
from .executor import WorkflowExecutor
from .guards import CallableGuard, Guard, GuardEvaluator
from .marking import Marking, get_marking, set_marking
from .state import MARKING_KEY, WorkflowError, WorkflowState, WorkflowStatus

__all__ = [
    "MARKING_KEY",
    "Action",
    "ActionDispatcher",
    "ActionFailedError",
    "ActionRunner",
    "BuiltWorkflow",
    "CallableAction",
    "CallableGuard",
    "ConfigurationError",
    "ExecutionLimitError",
    "ExecutionTimeoutError",
    "Guard",
    "GuardEvaluator",
    "InvalidDefinitionError",
    "InvalidResumeError",
    "InvalidSubjectError",
    "IterationLimitExceeded",
    "LockAcquisitionError",
    "Marking",
    "TextResult",
    "Transition",
    "WorkflowBuilder",
    "WorkflowDefinition",
    "WorkflowError",
    "WorkflowExecutor",
    "WorkflowNotFoundError",
    "WorkflowRuntimeError",
    "WorkflowState",
    "WorkflowStatus",
    "WorkflowStoreError",
    "get_marking",
    "set_marking",
]
