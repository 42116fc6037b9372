"""Abstract base class for agents handed to workflow actions."""

from abc import ABC, abstractmethod
from typing import Any


class Agent(ABC):
    """An opaque model-calling handle.

    The workflow engine never calls agents itself; it passes them through to
    actions, which decide how (and whether) to use them.
    """

    @abstractmethod
    def call(self, messages: list[dict[str, str]], **options: Any) -> str:
        """Send chat messages and return the reply text.

        Args:
            messages: List of message dicts with 'role' and 'content'.
            **options: Additional provider-specific parameters.

        Returns:
            Reply content.
        """
        pass

    def ask(self, prompt: str, **options: Any) -> str:
        """Shortcut for a single user message."""
        return self.call([{"role": "user", "content": prompt}], **options)
