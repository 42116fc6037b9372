#!/usr/bin/env python3
"""Simple three-step order workflow.

This demonstrates the basic building blocks:

* declare places and transitions with ``WorkflowBuilder``
* attach retryable actions to places
* guard a transition on the state's context
* execute with an in-memory store and a mock agent
"""

from __future__ import annotations

import argparse
from typing import Sequence

from agent_workflow import CallableAction, TextResult, WorkflowBuilder, WorkflowExecutor, WorkflowState
from agent_workflow.agent import MockAgent
from agent_workflow.logging import configure_logging
from agent_workflow.store import InMemoryWorkflowStore
from agent_workflow.workflow import WorkflowRuntimeError


def build_workflow():
    return (
        WorkflowBuilder.create("order-workflow")
        .add_place("draft")
        .add_place("submitted")
        .add_place("processed")
        .set_initial_place("draft")
        .add_transition("submit", "draft", "submitted")
        .add_transition("process", "submitted", "processed")
        .add_action_for_place(
            "submitted",
            CallableAction("validate-order", lambda agent, state: TextResult("Order validated")),
        )
        .add_action_for_place(
            "processed",
            CallableAction("complete-order", lambda agent, state: TextResult("Order completed")),
        )
        .add_guard_for_transition("submit", lambda state: bool(state.context.get("order_id")))
        .build()
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a simple order workflow.")
    parser.add_argument("--order-id", default="ORD-001", help="Order ID (empty blocks submission)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    state = WorkflowState(
        "order-123",
        context={"order_id": args.order_id, "customer": "John Doe"},
    )
    executor = WorkflowExecutor(build_workflow(), InMemoryWorkflowStore())

    try:
        result = executor.execute(MockAgent(), state)
    except WorkflowRuntimeError as exc:
        print(f"Workflow failed: {exc}")
        print(f"Current place: {state.current_place}")
        print(f"Errors: {len(state.errors)}")
        return 1

    print(f"Final place: {state.current_place}")
    print(f"Result: {result.content}")
    print(f"Status: {state.status.value}")
    print(f"Last action: {state.context.get('last_action', '-')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
