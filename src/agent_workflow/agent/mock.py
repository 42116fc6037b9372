from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Any

from agent_workflow.agent.base import Agent


class MockAgent(Agent):
    """Agent returning scripted replies, for tests and examples.

    Queued responses are returned first; afterwards every call returns
    ``default_response``. All calls are recorded in ``calls``.
    """

    def __init__(self, responses: Iterable[str] = (), default_response: str = "ok") -> None:
        self._responses: deque[str] = deque(responses)
        self.default_response = default_response
        self.calls: list[list[dict[str, str]]] = []

    def call(self, messages: list[dict[str, str]], **options: Any) -> str:
        self.calls.append(list(messages))
        if self._responses:
            return self._responses.popleft()
        return self.default_response
