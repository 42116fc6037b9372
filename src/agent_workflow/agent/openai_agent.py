"""OpenAI-backed agent implementation."""

import logging
from typing import Any

from openai import OpenAI

from agent_workflow.agent.base import Agent
from agent_workflow.core.config import AgentConfig
from agent_workflow.workflow.errors import ConfigurationError

logger = logging.getLogger(__name__)


class OpenAIAgent(Agent):
    """Agent answering through the OpenAI chat completions API."""

    def __init__(self, config: AgentConfig, client: OpenAI | None = None) -> None:
        """Initialize the OpenAI agent.

        Args:
            config: Agent configuration.
            client: Pre-built client; created from the API key when omitted.

        Raises:
            ConfigurationError: If no client is given and the API key is missing.
        """
        if client is None:
            if not config.openai_api_key:
                raise ConfigurationError("OpenAI API key is required")
            client = OpenAI(api_key=config.openai_api_key)

        self.client = client
        self.model = config.openai_model
        self.temperature = config.openai_temperature

        logger.info(f"OpenAI agent initialized with model: {self.model}")

    def call(self, messages: list[dict[str, str]], **options: Any) -> str:
        temperature = options.pop("temperature", self.temperature)

        logger.debug(f"Requesting chat completion with {len(messages)} messages")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,  # type: ignore[arg-type]
            temperature=temperature,
            **options,
        )

        content = response.choices[0].message.content or ""
        logger.debug(f"Received {len(content)} characters")

        return content
