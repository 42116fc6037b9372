"""Agents passed through the workflow to actions."""

from agent_workflow.agent.base import Agent
from agent_workflow.agent.factory import AgentFactory
from agent_workflow.agent.mock import MockAgent
from agent_workflow.agent.openai_agent import OpenAIAgent

__all__ = [
    "Agent",
    "AgentFactory",
    "MockAgent",
    "OpenAIAgent",
]
