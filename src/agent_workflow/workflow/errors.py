"""Exception hierarchy for workflow execution.

Every error carries a short string ``code`` which is copied onto the
:class:`~agent_workflow.workflow.state.WorkflowError` recorded in the state's
error log.
"""

from __future__ import annotations


class WorkflowRuntimeError(RuntimeError):
    code = "workflow_error"


class ConfigurationError(WorkflowRuntimeError):
    """Invalid wiring detected before or while starting a run. Never retried."""

    code = "configuration_error"


class InvalidDefinitionError(ConfigurationError):
    code = "invalid_definition"


class InvalidSubjectError(ConfigurationError):
    code = "invalid_subject"


class ActionFailedError(WorkflowRuntimeError):
    """An action exhausted all of its attempts.

    The last exception raised by the action is available as ``cause`` and is
    also chained as ``__cause__``.
    """

    code = "action_failed"

    def __init__(self, action_name: str, attempts: int, cause: BaseException | None) -> None:
        super().__init__(f'Action "{action_name}" failed after {attempts} attempts')
        self.action_name = action_name
        self.attempts = attempts
        self.cause = cause


class ExecutionLimitError(WorkflowRuntimeError):
    code = "execution_limit"


class IterationLimitExceeded(ExecutionLimitError):
    code = "iteration_limit"

    def __init__(self, max_iterations: int) -> None:
        super().__init__(f"Workflow exceeded maximum of {max_iterations} transitions")
        self.max_iterations = max_iterations


class ExecutionTimeoutError(ExecutionLimitError):
    code = "timeout"

    def __init__(self, max_execution_time: float) -> None:
        super().__init__(
            f"Workflow execution exceeded maximum time of {max_execution_time:g} seconds"
        )
        self.max_execution_time = max_execution_time


class WorkflowStoreError(WorkflowRuntimeError):
    code = "store_error"


class LockAcquisitionError(WorkflowStoreError):
    code = "lock_failed"

    def __init__(self, workflow_id: str) -> None:
        super().__init__(f"Could not acquire lock for workflow {workflow_id}")
        self.workflow_id = workflow_id


class WorkflowNotFoundError(WorkflowStoreError):
    code = "not_found"

    def __init__(self, workflow_id: str) -> None:
        super().__init__(f'Workflow with ID "{workflow_id}" not found')
        self.workflow_id = workflow_id


class InvalidResumeError(WorkflowRuntimeError):
    """Raised when resuming a workflow whose status is terminal."""

    code = "invalid_resume"


def error_code(exc: BaseException) -> str:
    """Return the code recorded for ``exc`` in a workflow error log."""

    if isinstance(exc, WorkflowRuntimeError):
        return exc.code
    return "unhandled_exception"
