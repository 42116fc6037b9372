"""Unit tests for agents."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from agent_workflow.agent import AgentFactory, MockAgent, OpenAIAgent
from agent_workflow.core.config import AgentConfig
from agent_workflow.workflow import ConfigurationError


def _completion(content: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def test_mock_agent_replays_responses_then_default() -> None:
    agent = MockAgent(responses=["first", "second"], default_response="fallback")

    assert agent.ask("a") == "first"
    assert agent.ask("b") == "second"
    assert agent.ask("c") == "fallback"
    assert [call[0]["content"] for call in agent.calls] == ["a", "b", "c"]


def test_openai_agent_requires_api_key() -> None:
    with pytest.raises(ConfigurationError):
        OpenAIAgent(AgentConfig(provider="openai"))


def test_openai_agent_calls_chat_completions() -> None:
    client = Mock()
    client.chat.completions.create.return_value = _completion("Paris")
    config = AgentConfig(provider="openai", openai_model="gpt-test", openai_temperature=0.2)
    agent = OpenAIAgent(config, client=client)

    messages = [{"role": "user", "content": "Capital of France?"}]
    assert agent.call(messages, max_tokens=10) == "Paris"

    client.chat.completions.create.assert_called_once_with(
        model="gpt-test",
        messages=messages,
        temperature=0.2,
        max_tokens=10,
    )


def test_openai_agent_temperature_override_and_empty_reply() -> None:
    client = Mock()
    client.chat.completions.create.return_value = _completion(None)
    agent = OpenAIAgent(AgentConfig(provider="openai"), client=client)

    assert agent.ask("hello", temperature=0.0) == ""
    assert client.chat.completions.create.call_args.kwargs["temperature"] == 0.0


def test_factory_creates_mock_agent() -> None:
    agent = AgentFactory.create(AgentConfig(provider="mock", mock_response="canned"))

    assert isinstance(agent, MockAgent)
    assert agent.ask("anything") == "canned"


def test_factory_creates_openai_agent() -> None:
    agent = AgentFactory.create(AgentConfig(provider="openai", openai_api_key="test-key"))

    assert isinstance(agent, OpenAIAgent)
    assert agent.model == "gpt-4o-mini"


def test_factory_rejects_unknown_provider() -> None:
    with pytest.raises(ConfigurationError):
        AgentFactory.create(AgentConfig.model_construct(provider="llama"))
