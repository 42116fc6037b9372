"""Token marking stored inside a workflow state's context."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .errors import InvalidSubjectError
from .state import MARKING_KEY, WorkflowState


class Marking:
    """Place -> token count.

    Workflows normally hold at most one token per place, but counts are kept
    so multi-token markings round-trip unchanged.
    """

    def __init__(self, places: Mapping[str, int] | None = None) -> None:
        self._places: dict[str, int] = {}
        for place, count in (places or {}).items():
            if count > 0:
                self._places[str(place)] = int(count)

    def has(self, place: str) -> bool:
        return self._places.get(place, 0) > 0

    def count(self, place: str) -> int:
        return self._places.get(place, 0)

    def mark(self, place: str, tokens: int = 1) -> None:
        self._places[place] = self._places.get(place, 0) + tokens

    def unmark(self, place: str, tokens: int = 1) -> None:
        remaining = self._places.get(place, 0) - tokens
        if remaining > 0:
            self._places[place] = remaining
        else:
            self._places.pop(place, None)

    def apply(self, froms: Iterable[str], tos: Iterable[str]) -> None:
        for place in froms:
            self.unmark(place)
        for place in tos:
            self.mark(place)

    def is_empty(self) -> bool:
        return not self._places

    def places(self) -> dict[str, int]:
        return dict(self._places)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Marking):
            return NotImplemented
        return self._places == other._places

    def __repr__(self) -> str:
        return f"Marking({self._places!r})"


def _require_state(subject: object) -> WorkflowState:
    if not isinstance(subject, WorkflowState):
        raise InvalidSubjectError(
            f"Subject must be an instance of WorkflowState, {type(subject).__name__} given"
        )
    return subject


def get_marking(subject: object) -> Marking:
    state = _require_state(subject)
    raw = state.context.get(MARKING_KEY)
    if not isinstance(raw, dict):
        return Marking()
    return Marking({str(k): v for k, v in raw.items() if isinstance(v, int)})


def set_marking(subject: object, marking: Marking) -> None:
    state = _require_state(subject)
    state.merge_context({MARKING_KEY: marking.places()})
