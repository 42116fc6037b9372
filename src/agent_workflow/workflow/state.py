from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# Context key under which the marking (place -> token count) is stored.
MARKING_KEY = "__marking"


class WorkflowStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in {WorkflowStatus.COMPLETED, WorkflowStatus.CANCELLED}


def describe_exception(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


@dataclass(frozen=True, slots=True)
class WorkflowError:
    """One entry of a workflow's error log.

    ``cause`` is the persisted description of the wrapped exception. The live
    exception (when the error was recorded in this process) is kept in
    ``exception`` and is not part of equality or serialization.
    """

    message: str
    place: str
    code: str = "workflow_error"
    cause: str | None = None
    context: dict[str, Any] = field(default_factory=dict)
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @staticmethod
    def from_exception(
        exc: BaseException,
        *,
        place: str,
        code: str,
        context: dict[str, Any] | None = None,
    ) -> WorkflowError:
        cause = exc.__cause__ if exc.__cause__ is not None else exc
        return WorkflowError(
            message=str(exc),
            place=place,
            code=code,
            cause=describe_exception(cause),
            context=dict(context or {}),
            exception=exc,
        )

    def to_json(self) -> dict[str, object]:
        return {
            "message": self.message,
            "place": self.place,
            "code": self.code,
            "cause": self.cause,
            "context": dict(self.context),
        }


class WorkflowErrorRecord(BaseModel):
    message: str
    place: str = ""
    code: str = "workflow_error"
    cause: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)


class WorkflowStateRecord(BaseModel):
    """Persisted representation of a :class:`WorkflowState`."""

    id: str
    context: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)
    status: WorkflowStatus = WorkflowStatus.PENDING
    errors: list[WorkflowErrorRecord] = Field(default_factory=list)


@dataclass(slots=True)
class WorkflowState:
    """Mutable state of a single workflow instance.

    The executor owns the state for the duration of a run; the store holds the
    durable copy between runs.
    """

    id: str
    context: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    status: WorkflowStatus = WorkflowStatus.PENDING
    errors: list[WorkflowError] = field(default_factory=list)

    @property
    def current_place(self) -> str:
        """First place holding a token, or an empty string."""

        places = self.context.get(MARKING_KEY)
        if not isinstance(places, dict):
            return ""
        for place, count in places.items():
            if count:
                return str(place)
        return ""

    def merge_context(self, values: dict[str, Any]) -> None:
        self.context.update(values)

    def add_error(self, error: WorkflowError) -> None:
        self.errors.append(error)

    def clear_errors(self) -> None:
        self.errors.clear()

    def to_json(self) -> dict[str, object]:
        return {
            "id": self.id,
            "context": self.context,
            "metadata": self.metadata,
            "status": self.status.value,
            "errors": [e.to_json() for e in self.errors],
        }

    @staticmethod
    def from_json(obj: dict[str, Any]) -> WorkflowState:
        record = WorkflowStateRecord.model_validate(obj)
        return WorkflowState(
            id=record.id,
            context=record.context,
            metadata=record.metadata,
            status=record.status,
            errors=[
                WorkflowError(
                    message=e.message,
                    place=e.place,
                    code=e.code,
                    cause=e.cause,
                    context=e.context,
                )
                for e in record.errors
            ],
        )
