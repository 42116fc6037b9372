"""Workflow definitions and the builder that produces them."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .actions import Action
from .errors import InvalidDefinitionError
from .guards import CallableGuard, Guard
from .state import WorkflowState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Transition:
    name: str
    froms: tuple[str, ...]
    tos: tuple[str, ...]


def _freeze(metadata: Mapping[str, Mapping[str, Any]]) -> Mapping[str, Mapping[str, Any]]:
    return MappingProxyType({key: MappingProxyType(dict(value)) for key, value in metadata.items()})


@dataclass(frozen=True, slots=True)
class WorkflowDefinition:
    """Immutable place/transition graph.

    Shared read-only across executions. Construction validates that every
    transition references declared places and that the initial place exists.
    """

    places: tuple[str, ...]
    transitions: tuple[Transition, ...]
    initial_place: str
    place_metadata: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)
    transition_metadata: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.places:
            raise InvalidDefinitionError("Workflow definition has no places")
        if len(set(self.places)) != len(self.places):
            raise InvalidDefinitionError("Workflow places must be unique")
        if self.initial_place not in self.places:
            raise InvalidDefinitionError(
                f'Initial place "{self.initial_place}" is not a place of the workflow'
            )
        known = set(self.places)
        for t in self.transitions:
            if not t.froms or not t.tos:
                raise InvalidDefinitionError(
                    f'Transition "{t.name}" needs at least one source and one destination'
                )
            for place in (*t.froms, *t.tos):
                if place not in known:
                    raise InvalidDefinitionError(
                        f'Transition "{t.name}" references unknown place "{place}"'
                    )
        object.__setattr__(self, "place_metadata", _freeze(self.place_metadata))
        object.__setattr__(self, "transition_metadata", _freeze(self.transition_metadata))


@dataclass(frozen=True, slots=True)
class BuiltWorkflow:
    """A definition together with its frozen action and guard registries."""

    name: str
    definition: WorkflowDefinition
    place_actions: Mapping[str, tuple[Action, ...]]
    transition_guards: Mapping[str, tuple[Guard, ...]]


def _as_places(value: str | Sequence[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class WorkflowBuilder:
    """Fluent builder for :class:`BuiltWorkflow`.

    Example::

        workflow = (
            WorkflowBuilder.create("order")
            .add_transition("submit", "draft", "submitted")
            .add_action_for_place("submitted", validate_order)
            .build()
        )
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._places: list[str] = []
        self._transitions: list[Transition] = []
        self._place_actions: dict[str, list[Action]] = {}
        self._transition_guards: dict[str, list[Guard]] = {}
        self._place_metadata: dict[str, dict[str, Any]] = {}
        self._transition_metadata: dict[str, dict[str, Any]] = {}
        self._initial_place: str | None = None

    @classmethod
    def create(cls, name: str) -> WorkflowBuilder:
        return cls(name)

    @property
    def name(self) -> str:
        return self._name

    def add_place(self, place: str, metadata: Mapping[str, Any] | None = None) -> WorkflowBuilder:
        if place not in self._places:
            self._places.append(place)
            if metadata:
                self._place_metadata[place] = dict(metadata)
        return self

    def set_initial_place(self, place: str) -> WorkflowBuilder:
        self._initial_place = place
        return self.add_place(place)

    def add_transition(
        self,
        name: str,
        from_: str | Sequence[str],
        to: str | Sequence[str],
        metadata: Mapping[str, Any] | None = None,
    ) -> WorkflowBuilder:
        froms = _as_places(from_)
        tos = _as_places(to)
        for place in (*froms, *tos):
            self.add_place(place)

        self._transitions.append(Transition(name=name, froms=tuple(froms), tos=tuple(tos)))
        if metadata:
            self._transition_metadata[name] = dict(metadata)
        return self

    def add_action_for_place(self, place: str, action: Action) -> WorkflowBuilder:
        self.add_place(place)
        self._place_actions.setdefault(place, []).append(action)
        return self

    def add_guard_for_transition(
        self,
        transition_name: str,
        guard: Guard | Callable[[WorkflowState], bool],
    ) -> WorkflowBuilder:
        if not hasattr(guard, "evaluate"):
            guard = CallableGuard(guard)  # type: ignore[arg-type]
        self._transition_guards.setdefault(transition_name, []).append(guard)  # type: ignore[arg-type]
        return self

    def build(self) -> BuiltWorkflow:
        if not self._places:
            raise InvalidDefinitionError(f'Workflow "{self._name}" has no places')

        initial = self._initial_place if self._initial_place is not None else self._places[0]
        definition = WorkflowDefinition(
            places=tuple(self._places),
            transitions=tuple(self._transitions),
            initial_place=initial,
            place_metadata=self._place_metadata,
            transition_metadata=self._transition_metadata,
        )

        names = {t.name for t in self._transitions}
        for transition_name in self._transition_guards:
            if transition_name not in names:
                logger.warning(
                    "Guard registered for unknown transition",
                    extra={"workflow": self._name, "transition": transition_name},
                )

        return BuiltWorkflow(
            name=self._name,
            definition=definition,
            place_actions=MappingProxyType(
                {place: tuple(actions) for place, actions in self._place_actions.items()}
            ),
            transition_guards=MappingProxyType(
                {name: tuple(guards) for name, guards in self._transition_guards.items()}
            ),
        )
