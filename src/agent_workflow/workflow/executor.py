"""Drives workflow states through a built workflow."""

from __future__ import annotations

import logging
import time
import traceback
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .actions import ActionDispatcher, ActionRunner, TextResult
from .definition import BuiltWorkflow
from .errors import (
    ConfigurationError,
    ExecutionTimeoutError,
    InvalidResumeError,
    IterationLimitExceeded,
    WorkflowNotFoundError,
    error_code,
)
from .guards import GuardEvaluator
from .marking import get_marking, set_marking
from .state import WorkflowError, WorkflowState, WorkflowStatus

if TYPE_CHECKING:
    from agent_workflow.core.config import WorkflowConfig
    from agent_workflow.store.base import WorkflowStore

logger = logging.getLogger(__name__)

DEFAULT_RESULT = "Workflow completed successfully"

_OPTION_KEYS = frozenset({"max_iterations", "max_execution_time"})


@dataclass(slots=True)
class _Progress:
    """Where a run currently is, for error attribution."""

    place: str


class WorkflowExecutor:
    """Runs a :class:`WorkflowState` until no transition is enabled.

    Each step fires the first enabled transition in declaration order, runs
    the entry actions of its destination places and persists the state.
    Failures are recorded on the state, which is persisted with status
    ``failed`` before the exception reaches the caller.
    """

    def __init__(
        self,
        workflow: BuiltWorkflow,
        store: WorkflowStore,
        *,
        max_iterations: int = 100,
        max_execution_time: float = 300.0,
        runner: ActionRunner | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_iterations < 1:
            raise ConfigurationError("max_iterations must be >= 1")
        if max_execution_time <= 0:
            raise ConfigurationError("max_execution_time must be > 0")

        self._workflow = workflow
        self._store = store
        self._max_iterations = max_iterations
        self._max_execution_time = max_execution_time
        self._clock = clock
        self._guards = GuardEvaluator(workflow.transition_guards)
        self._dispatcher = ActionDispatcher(workflow.place_actions, runner or ActionRunner())

    @classmethod
    def from_config(cls, workflow: BuiltWorkflow, config: WorkflowConfig) -> WorkflowExecutor:
        from agent_workflow.store.factory import WorkflowStoreFactory

        return cls(
            workflow,
            WorkflowStoreFactory.create(config.store),
            max_iterations=config.executor.max_iterations,
            max_execution_time=config.executor.max_execution_time,
        )

    @property
    def workflow(self) -> BuiltWorkflow:
        return self._workflow

    @property
    def store(self) -> WorkflowStore:
        return self._store

    def execute(
        self,
        agent: Any,
        state: WorkflowState,
        options: Mapping[str, Any] | None = None,
    ) -> TextResult:
        """Run ``state`` from its current marking until the workflow settles.

        ``options`` may override ``max_iterations`` and ``max_execution_time``
        for this call.
        """

        max_iterations, max_execution_time = self._limits(options)
        start = self._clock()
        progress = _Progress(state.current_place)

        try:
            state.status = WorkflowStatus.RUNNING
            self._store.save(state)
            logger.info(
                "Workflow started",
                extra={"workflow_id": state.id, "workflow": self._workflow.name},
            )

            result = self._run(agent, state, progress, start, max_iterations, max_execution_time)

            state.status = WorkflowStatus.COMPLETED
            self._store.save(state)
            logger.info("Workflow completed", extra={"workflow_id": state.id})
            return result
        except Exception as e:
            self._fail(state, e, progress.place)
            raise

    def resume(self, workflow_id: str, agent: Any) -> TextResult:
        """Continue a persisted workflow from its last saved marking."""

        state = self._store.load(workflow_id)
        if state is None:
            raise WorkflowNotFoundError(workflow_id)
        if state.status.is_terminal:
            raise InvalidResumeError(
                f'Workflow "{workflow_id}" is {state.status.value} and cannot be resumed'
            )

        if state.status == WorkflowStatus.FAILED:
            state.clear_errors()
            logger.info("Cleared errors for failed workflow", extra={"workflow_id": workflow_id})

        start = self._clock()
        progress = _Progress(state.current_place)
        try:
            state.status = WorkflowStatus.RUNNING
            self._store.save(state)
            logger.info(
                "Resuming workflow",
                extra={"workflow_id": workflow_id, "current_place": progress.place},
            )

            result = self._run(
                agent, state, progress, start, self._max_iterations, self._max_execution_time
            )

            state.status = WorkflowStatus.COMPLETED
            self._store.save(state)
            logger.info("Workflow resumed and completed", extra={"workflow_id": workflow_id})
            return result
        except Exception as e:
            self._fail(state, e, progress.place)
            raise

    def _limits(self, options: Mapping[str, Any] | None) -> tuple[int, float]:
        opts = dict(options or {})
        unknown = set(opts) - _OPTION_KEYS
        if unknown:
            raise ConfigurationError(f"Unsupported execution options: {sorted(unknown)}")

        try:
            max_iterations = int(opts.get("max_iterations", self._max_iterations))
            max_execution_time = float(opts.get("max_execution_time", self._max_execution_time))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid execution options: {e}") from e
        if max_iterations < 1:
            raise ConfigurationError("max_iterations must be >= 1")
        if max_execution_time <= 0:
            raise ConfigurationError("max_execution_time must be > 0")
        return max_iterations, max_execution_time

    def _run(
        self,
        agent: Any,
        state: WorkflowState,
        progress: _Progress,
        start: float,
        max_iterations: int,
        max_execution_time: float,
    ) -> TextResult:
        definition = self._workflow.definition
        marking = get_marking(state)
        if marking.is_empty():
            marking.mark(definition.initial_place)
            set_marking(state, marking)
            progress.place = definition.initial_place
            logger.debug(
                "Seeded initial marking",
                extra={"workflow_id": state.id, "place": definition.initial_place},
            )

        last_result: TextResult | None = None
        applied = 0

        while True:
            if self._clock() - start > max_execution_time:
                raise ExecutionTimeoutError(max_execution_time)

            marking = get_marking(state)
            enabled = self._guards.enabled_transitions(definition.transitions, marking, state)
            if not enabled:
                logger.debug(
                    "No more transitions available, workflow complete",
                    extra={"workflow_id": state.id, "place": progress.place},
                )
                break

            if applied >= max_iterations:
                raise IterationLimitExceeded(max_iterations)

            transition = enabled[0]
            logger.debug(
                "Applying transition",
                extra={
                    "workflow_id": state.id,
                    "transition": transition.name,
                    "from": list(transition.froms),
                    "to": list(transition.tos),
                    "iteration": applied + 1,
                },
            )

            marking.apply(transition.froms, transition.tos)
            set_marking(state, marking)
            applied += 1

            for place in transition.tos:
                progress.place = place
                self._dispatcher.dispatch(place, agent, state)

            self._store.save(state)

            if "last_result" in state.context:
                last_result = TextResult(str(state.context["last_result"]))

        return last_result or TextResult(DEFAULT_RESULT)

    def _fail(self, state: WorkflowState, exc: Exception, place: str) -> None:
        # The dispatcher records action failures itself.
        if not (state.errors and state.errors[-1].exception is exc):
            state.add_error(
                WorkflowError.from_exception(
                    exc,
                    place=place,
                    code=error_code(exc),
                    context={"trace": "".join(traceback.format_exception(exc))},
                )
            )
        state.status = WorkflowStatus.FAILED

        logger.error(
            "Workflow failed",
            extra={"workflow_id": state.id, "place": place, "error": str(exc)},
        )
        try:
            self._store.save(state)
        except Exception:
            logger.exception("Failed to persist failed workflow", extra={"workflow_id": state.id})
