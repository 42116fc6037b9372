from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from .marking import Marking
from .state import WorkflowState

if TYPE_CHECKING:
    from .definition import Transition

logger = logging.getLogger(__name__)


class Guard(Protocol):
    """A predicate deciding whether a transition may fire."""

    def evaluate(self, state: WorkflowState) -> bool: ...


@dataclass(frozen=True, slots=True)
class CallableGuard:
    """Adapts a plain ``(state) -> bool`` callable to :class:`Guard`."""

    predicate: Callable[[WorkflowState], bool]

    def evaluate(self, state: WorkflowState) -> bool:
        return bool(self.predicate(state))


class GuardEvaluator:
    """Decides which transitions are enabled for a marking.

    Guards for one transition are AND-ed in registration order. The first
    guard returning False blocks the transition and the remaining guards are
    skipped. A guard that raises blocks the transition and its exception
    propagates unchanged.
    """

    def __init__(self, transition_guards: Mapping[str, Sequence[Guard]]) -> None:
        self._guards = transition_guards

    def is_allowed(self, transition_name: str, state: WorkflowState) -> bool:
        for guard in self._guards.get(transition_name, ()):
            try:
                allowed = guard.evaluate(state)
            except Exception as e:
                logger.error(
                    "Guard evaluation failed",
                    extra={"transition": transition_name, "workflow_id": state.id, "error": str(e)},
                )
                raise
            if not allowed:
                logger.debug(
                    "Transition blocked by guard",
                    extra={"transition": transition_name, "workflow_id": state.id},
                )
                return False
        return True

    def is_enabled(self, transition: Transition, marking: Marking, state: WorkflowState) -> bool:
        if not all(marking.has(place) for place in transition.froms):
            return False
        return self.is_allowed(transition.name, state)

    def enabled_transitions(
        self, transitions: Sequence[Transition], marking: Marking, state: WorkflowState
    ) -> list[Transition]:
        """Enabled transitions, in declaration order."""

        return [t for t in transitions if self.is_enabled(t, marking, state)]
