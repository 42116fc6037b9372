"""Factory for creating agents."""

import logging

from agent_workflow.agent.base import Agent
from agent_workflow.agent.mock import MockAgent
from agent_workflow.agent.openai_agent import OpenAIAgent
from agent_workflow.core.config import AgentConfig
from agent_workflow.workflow.errors import ConfigurationError

logger = logging.getLogger(__name__)


class AgentFactory:
    """Factory for creating agent instances."""

    @staticmethod
    def create(config: AgentConfig) -> Agent:
        """Create an agent based on configuration.

        Raises:
            ConfigurationError: If the provider is not supported.
        """
        logger.info(f"Creating agent: {config.provider}")

        if config.provider == "mock":
            return MockAgent(default_response=config.mock_response)
        elif config.provider == "openai":
            return OpenAIAgent(config)
        else:
            raise ConfigurationError(f"Unsupported agent provider: {config.provider}")
