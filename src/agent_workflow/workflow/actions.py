"""Place-entry actions, the retrying runner and the dispatcher."""

from __future__ import annotations

import logging
import time
import traceback
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ActionFailedError, ConfigurationError, error_code
from .state import WorkflowError, WorkflowState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TextResult:
    content: str


class Action(Protocol):
    """A step executed when the workflow enters a place."""

    name: str
    retry_count: int
    retry_delay: float
    parallel: bool

    def execute(self, agent: Any, state: WorkflowState) -> TextResult: ...


@dataclass(frozen=True, slots=True)
class CallableAction:
    """An :class:`Action` backed by a plain ``(agent, state) -> TextResult`` callable.

    ``parallel`` is accepted for configuration compatibility. Actions always
    run sequentially in registration order.
    """

    name: str
    executor: Callable[[Any, WorkflowState], TextResult]
    retry_count: int = 3
    retry_delay: float = 1.0
    parallel: bool = False

    def __post_init__(self) -> None:
        if self.retry_count < 1:
            raise ConfigurationError(f'Action "{self.name}" needs retry_count >= 1')
        if self.retry_delay < 0:
            raise ConfigurationError(f'Action "{self.name}" needs retry_delay >= 0')

    def execute(self, agent: Any, state: WorkflowState) -> TextResult:
        return self.executor(agent, state)


class ActionRunner:
    """Runs one action with a bounded number of attempts and a fixed delay."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._sleep = sleep

    def run(self, action: Action, agent: Any, state: WorkflowState) -> TextResult:
        max_attempts = action.retry_count
        if max_attempts < 1:
            raise ConfigurationError(f'Action "{action.name}" needs retry_count >= 1')

        last_exc: Exception | None = None
        for attempt in range(1, max_attempts + 1):
            logger.debug(
                "Executing action",
                extra={"action": action.name, "attempt": attempt, "max_attempts": max_attempts},
            )
            try:
                return action.execute(agent, state)
            except Exception as e:
                last_exc = e
                if attempt < max_attempts:
                    logger.warning(
                        "Action failed, retrying",
                        extra={
                            "action": action.name,
                            "attempt": attempt,
                            "max_attempts": max_attempts,
                            "error": str(e),
                        },
                    )
                    self._sleep(action.retry_delay)

        logger.error(
            "Action failed after all retry attempts",
            extra={"action": action.name, "attempts": max_attempts, "error": str(last_exc)},
        )
        raise ActionFailedError(action.name, max_attempts, last_exc) from last_exc


class ActionDispatcher:
    """Runs the actions registered for a place, in registration order."""

    def __init__(
        self,
        place_actions: Mapping[str, Sequence[Action]],
        runner: ActionRunner | None = None,
    ) -> None:
        self._place_actions = place_actions
        self._runner = runner or ActionRunner()

    def dispatch(self, place: str, agent: Any, state: WorkflowState) -> TextResult | None:
        """Execute the actions of ``place``.

        Returns the result of the last action, or None when the place has no
        actions. On failure the error is appended to ``state`` before the
        exception is re-raised.
        """

        actions = self._place_actions.get(place, ())
        if not actions:
            return None

        logger.info(
            "Executing actions for place",
            extra={"place": place, "action_count": len(actions), "workflow_id": state.id},
        )

        result: TextResult | None = None
        for action in actions:
            if getattr(action, "parallel", False):
                logger.debug(
                    "Parallel action executed sequentially",
                    extra={"action": action.name, "place": place},
                )
            try:
                result = self._runner.run(action, agent, state)
            except Exception as e:
                state.add_error(
                    WorkflowError.from_exception(
                        e,
                        place=place,
                        code=error_code(e),
                        context={
                            "action": action.name,
                            "trace": "".join(traceback.format_exception(e)),
                        },
                    )
                )
                logger.error(
                    "Action execution failed",
                    extra={"action": action.name, "place": place, "error": str(e)},
                )
                raise

            state.merge_context(
                {
                    "last_result": result.content,
                    "last_action": action.name,
                    "last_place": place,
                }
            )
            logger.debug(
                "Action executed successfully", extra={"action": action.name, "place": place}
            )
        return result
