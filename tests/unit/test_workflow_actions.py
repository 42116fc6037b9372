"""Unit tests for action retries and place-entry dispatch."""

from __future__ import annotations

import pytest

from agent_workflow.agent import MockAgent
from agent_workflow.workflow import (
    ActionDispatcher,
    ActionFailedError,
    ActionRunner,
    CallableAction,
    ConfigurationError,
    TextResult,
    WorkflowState,
)


class FlakyExecutor:
    """Fails a fixed number of times, then succeeds."""

    def __init__(self, failures: int, content: str = "done") -> None:
        self.failures = failures
        self.content = content
        self.calls = 0

    def __call__(self, _agent: object, _state: WorkflowState) -> TextResult:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"failure {self.calls}")
        return TextResult(self.content)


def test_runner_retries_until_success(runner: ActionRunner, sleep) -> None:
    executor = FlakyExecutor(failures=2)
    action = CallableAction("flaky", executor, retry_count=3, retry_delay=0.5)

    result = runner.run(action, MockAgent(), WorkflowState("wf-1"))

    assert result == TextResult("done")
    assert executor.calls == 3
    assert sleep.delays == [0.5, 0.5]


def test_runner_first_success_does_not_sleep(runner: ActionRunner, sleep) -> None:
    executor = FlakyExecutor(failures=0)

    runner.run(CallableAction("ok", executor, retry_count=5), MockAgent(), WorkflowState("wf-1"))

    assert executor.calls == 1
    assert sleep.delays == []


def test_runner_raises_after_exhausting_attempts(runner: ActionRunner, sleep) -> None:
    executor = FlakyExecutor(failures=10)
    action = CallableAction("broken", executor, retry_count=2, retry_delay=1.0)

    with pytest.raises(ActionFailedError) as excinfo:
        runner.run(action, MockAgent(), WorkflowState("wf-1"))

    assert executor.calls == 2
    assert sleep.delays == [1.0]
    assert excinfo.value.action_name == "broken"
    assert excinfo.value.attempts == 2
    assert str(excinfo.value.cause) == "failure 2"
    assert excinfo.value.__cause__ is excinfo.value.cause


def test_callable_action_validates_retry_settings() -> None:
    with pytest.raises(ConfigurationError):
        CallableAction("bad", FlakyExecutor(0), retry_count=0)
    with pytest.raises(ConfigurationError):
        CallableAction("bad", FlakyExecutor(0), retry_delay=-1)


def test_dispatch_without_actions_is_noop(runner: ActionRunner) -> None:
    dispatcher = ActionDispatcher({}, runner)
    state = WorkflowState("wf-1")

    assert dispatcher.dispatch("anywhere", MockAgent(), state) is None
    assert state.context == {}


def test_dispatch_merges_last_result_in_registration_order(runner: ActionRunner) -> None:
    order: list[str] = []

    def make(name: str) -> CallableAction:
        def run(_agent: object, _state: WorkflowState) -> TextResult:
            order.append(name)
            return TextResult(f"{name} result")

        return CallableAction(name, run, parallel=True)

    dispatcher = ActionDispatcher({"processing": (make("emails"), make("analytics"))}, runner)
    state = WorkflowState("wf-1", context={"batch_id": "B-1"})

    result = dispatcher.dispatch("processing", MockAgent(), state)

    assert order == ["emails", "analytics"]
    assert result == TextResult("analytics result")
    assert state.context["last_result"] == "analytics result"
    assert state.context["last_action"] == "analytics"
    assert state.context["last_place"] == "processing"
    assert state.context["batch_id"] == "B-1"


def test_dispatch_records_error_and_reraises(runner: ActionRunner) -> None:
    action = CallableAction("validate", FlakyExecutor(failures=5), retry_count=2)
    dispatcher = ActionDispatcher({"validating": (action,)}, runner)
    state = WorkflowState("wf-1")

    with pytest.raises(ActionFailedError):
        dispatcher.dispatch("validating", MockAgent(), state)

    assert len(state.errors) == 1
    error = state.errors[0]
    assert error.place == "validating"
    assert error.code == "action_failed"
    assert error.context["action"] == "validate"
    assert error.cause == "RuntimeError: failure 2"
    assert "last_result" not in state.context


def test_actions_receive_agent(runner: ActionRunner) -> None:
    agent = MockAgent(responses=["summary text"])

    def summarise(a: MockAgent, state: WorkflowState) -> TextResult:
        return TextResult(a.ask(f"Summarise {state.id}"))

    dispatcher = ActionDispatcher({"summary": (CallableAction("summarise", summarise),)}, runner)
    state = WorkflowState("doc-7")

    dispatcher.dispatch("summary", agent, state)

    assert state.context["last_result"] == "summary text"
    assert agent.calls == [[{"role": "user", "content": "Summarise doc-7"}]]
