#!/usr/bin/env python3
"""Resume a failed workflow from its persisted marking.

The first run fails while validating; the state is persisted with status
``failed`` under ``--state-dir``. ``resume`` reloads it, clears the errors and
continues from the place where the run stopped.
"""

from __future__ import annotations

import argparse
import tempfile
from pathlib import Path
from typing import Sequence

from agent_workflow import CallableAction, TextResult, WorkflowBuilder, WorkflowExecutor, WorkflowState
from agent_workflow.agent import MockAgent
from agent_workflow.core.config import StoreConfig
from agent_workflow.logging import configure_logging
from agent_workflow.store import WorkflowStoreFactory
from agent_workflow.workflow import WorkflowRuntimeError


def validate_data(agent, state: WorkflowState) -> TextResult:
    if "validation_attempted" not in state.context:
        state.merge_context({"validation_attempted": True})
        raise RuntimeError("Validation failed - data incomplete")
    return TextResult("Data validated successfully")


def build_workflow():
    return (
        WorkflowBuilder.create("data-processing")
        .set_initial_place("start")
        .add_transition("fetch", "start", "fetching")
        .add_transition("validate", "fetching", "validating")
        .add_transition("process", "validating", "processing")
        .add_transition("complete", "processing", "completed")
        .add_action_for_place(
            "fetching",
            CallableAction("fetch-data", lambda agent, state: TextResult("Data fetched: 1000 records")),
        )
        .add_action_for_place(
            "validating",
            CallableAction("validate-data", validate_data, retry_count=1),
        )
        .add_action_for_place(
            "processing",
            CallableAction(
                "process-data",
                lambda agent, state: TextResult("Data processed: all 1000 records"),
            ),
        )
        .build()
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fail a workflow, then resume it.")
    parser.add_argument(
        "--state-dir",
        type=Path,
        default=None,
        help="Directory for persisted states (a temporary directory by default)",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    state_dir = args.state_dir or Path(tempfile.mkdtemp()) / "workflow_states"
    store = WorkflowStoreFactory.create(StoreConfig(backend="filesystem", storage_path=state_dir))
    executor = WorkflowExecutor(build_workflow(), store)
    agent = MockAgent()

    state = WorkflowState("data-job-456", context={"dataset": "customers-2024"})
    try:
        executor.execute(agent, state)
        print("Workflow completed on first try")
    except WorkflowRuntimeError as exc:
        print(f"Workflow failed: {exc}")
        print(f"Current place: {state.current_place}")
        print(f"Status: {state.status.value}")
        print(f"Errors: {len(state.errors)}")

    print(f"Resuming from {state_dir}")
    try:
        result = executor.resume("data-job-456", agent)
    except WorkflowRuntimeError as exc:
        print(f"Resume failed: {exc}")
        return 1

    resumed = store.load("data-job-456")
    print(f"Final place: {resumed.current_place if resumed else '-'}")
    print(f"Result: {result.content}")

    store.remove("data-job-456")
    if args.state_dir is None:
        store.drop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
