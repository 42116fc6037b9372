#!/usr/bin/env python3
"""Several actions flagged ``parallel`` on one place.

The flag is accepted on every action, but the dispatcher still runs the
actions of a place one after another in registration order. The reported
duration is therefore roughly the sum of the individual action times.
"""

from __future__ import annotations

import argparse
import time
from typing import Sequence

from agent_workflow import CallableAction, TextResult, WorkflowBuilder, WorkflowExecutor, WorkflowState
from agent_workflow.agent import MockAgent
from agent_workflow.logging import configure_logging
from agent_workflow.store import InMemoryWorkflowStore


def _batch_task(name: str, message: str, seconds: float) -> CallableAction:
    def run(agent, state: WorkflowState) -> TextResult:
        time.sleep(seconds)
        state.merge_context({name: message})
        return TextResult(message)

    return CallableAction(name, run, parallel=True)


def build_workflow(task_seconds: float):
    return (
        WorkflowBuilder.create("batch-processor")
        .set_initial_place("idle")
        .add_transition("start", "idle", "processing")
        .add_transition("finish", "processing", "completed")
        .add_action_for_place(
            "processing", _batch_task("process-emails", "Processed 500 emails", task_seconds)
        )
        .add_action_for_place(
            "processing",
            _batch_task("process-notifications", "Sent 250 notifications", task_seconds),
        )
        .add_action_for_place(
            "processing",
            _batch_task("update-analytics", "Updated analytics dashboard", task_seconds),
        )
        .build()
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a batch with parallel-flagged actions.")
    parser.add_argument("--task-seconds", type=float, default=0.1, help="Duration of each action")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    state = WorkflowState("batch-001", context={"batch_id": "BATCH-2024-001"})
    executor = WorkflowExecutor(build_workflow(args.task_seconds), InMemoryWorkflowStore())

    started = time.perf_counter()
    result = executor.execute(MockAgent(), state)
    duration_ms = (time.perf_counter() - started) * 1000

    print(f"Batch ID: {state.context['batch_id']}")
    print(f"Duration: {duration_ms:.0f}ms for 3 actions of {args.task_seconds * 1000:.0f}ms each")
    for name in ("process-emails", "process-notifications", "update-analytics"):
        print(f"  {name}: {state.context[name]}")
    print(f"Final place: {state.current_place}")
    print(f"Result: {result.content}")
    print(f"Status: {state.status.value}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
