#!/usr/bin/env python3
"""Route content through different paths with guards.

Each item carries a ``confidence_score``; guards on the outgoing transitions
of ``submitted`` decide whether it is approved automatically, sent to manual
review or rejected outright.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from agent_workflow import CallableAction, TextResult, WorkflowBuilder, WorkflowExecutor, WorkflowState
from agent_workflow.agent import MockAgent
from agent_workflow.logging import configure_logging
from agent_workflow.store import InMemoryWorkflowStore


def _score(state: WorkflowState) -> float:
    return float(state.context.get("confidence_score", 0))


def build_workflow():
    return (
        WorkflowBuilder.create("content-moderation")
        .set_initial_place("submitted")
        .add_transition("auto_approve", "submitted", "auto_approved")
        .add_guard_for_transition("auto_approve", lambda state: _score(state) >= 0.9)
        .add_transition("needs_review", "submitted", "manual_review")
        .add_guard_for_transition("needs_review", lambda state: 0.3 <= _score(state) < 0.9)
        .add_transition("auto_reject", "submitted", "rejected")
        .add_guard_for_transition("auto_reject", lambda state: _score(state) < 0.3)
        .add_action_for_place(
            "auto_approved",
            CallableAction(
                "notify-auto-approval",
                lambda agent, state: TextResult("User notified of automatic approval"),
            ),
        )
        .add_action_for_place(
            "manual_review",
            CallableAction(
                "assign-reviewer",
                lambda agent, state: TextResult("Content assigned to human reviewer"),
            ),
        )
        .build()
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Route content by confidence score.")
    parser.add_argument(
        "--scores",
        default="0.95,0.65,0.15",
        help='Comma-separated confidence scores, e.g. "0.95,0.65,0.15"',
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(args.log_level)

    scores = [float(s) for s in args.scores.split(",") if s.strip()]
    executor = WorkflowExecutor(build_workflow(), InMemoryWorkflowStore())

    for index, score in enumerate(scores, start=1):
        state = WorkflowState(f"content-{index:03d}", context={"confidence_score": score})
        result = executor.execute(MockAgent(), state)
        print(f"{state.id} (score {score}): {state.current_place} - {result.content}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
