"""CLI for inspecting and managing persisted workflow states.

Workflows themselves are defined and executed in Python; this entrypoint only
operates on the configured store.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from agent_workflow import __version__
from agent_workflow.core.config import WorkflowConfig
from agent_workflow.store.factory import WorkflowStoreFactory
from agent_workflow.workflow.errors import WorkflowNotFoundError
from agent_workflow.workflow.state import WorkflowStatus

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-workflow",
        description="Inspect and manage persisted workflow states",
    )
    parser.add_argument("--version", action="version", version=f"agent-workflow {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print a persisted workflow state as JSON")
    show.add_argument("workflow_id", help="Workflow ID")

    cancel = subparsers.add_parser(
        "cancel",
        help="Mark a workflow as cancelled so it can no longer be resumed",
    )
    cancel.add_argument("workflow_id", help="Workflow ID")

    remove = subparsers.add_parser("remove", help="Delete a persisted workflow state")
    remove.add_argument("workflow_id", help="Workflow ID")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = WorkflowConfig()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    config.setup_logging()

    try:
        store = WorkflowStoreFactory.create(config.store)

        if args.command == "show":
            state = store.load(args.workflow_id)
            if state is None:
                raise WorkflowNotFoundError(args.workflow_id)
            print(json.dumps(state.to_json(), indent=2, ensure_ascii=False))
            return 0

        if args.command == "cancel":
            state = store.load(args.workflow_id)
            if state is None:
                raise WorkflowNotFoundError(args.workflow_id)
            if state.status == WorkflowStatus.COMPLETED:
                print(f'Workflow "{args.workflow_id}" is already completed', file=sys.stderr)
                return 4
            if state.status != WorkflowStatus.CANCELLED:
                state.status = WorkflowStatus.CANCELLED
                store.save(state)
                logger.info("Workflow cancelled", extra={"workflow_id": state.id})
            print(f'Workflow "{args.workflow_id}" cancelled')
            return 0

        if args.command == "remove":
            store.remove(args.workflow_id)
            print(f'Workflow "{args.workflow_id}" removed')
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except WorkflowNotFoundError as e:
        logger.warning(str(e), extra={"workflow_id": e.workflow_id})
        print(str(e), file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
