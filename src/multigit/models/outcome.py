from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
    DONE = "done"
    UNCHANGED = "unchanged"
    NOT_FOUND = "not-found"
    ALREADY_EXISTS = "already-exists"
    NOTHING_TO_COMMIT = "nothing-to-commit"
    WARNING = "warning"


class StepResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    step: str
    status: StepStatus = StepStatus.DONE
    message: str = ""


class OutcomeStatus(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ExecutionOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    status: OutcomeStatus
    detail: str = ""
    steps: tuple[StepResult, ...] = ()
    error: str = ""

    @classmethod
    def skipped(cls, path: str, reason: str) -> ExecutionOutcome:
        return cls(path=path, status=OutcomeStatus.SKIPPED, detail=reason)

    @classmethod
    def succeeded(cls, path: str, steps: list[StepResult]) -> ExecutionOutcome:
        return cls(path=path, status=OutcomeStatus.SUCCEEDED, steps=tuple(steps))

    @classmethod
    def failed(cls, path: str, error: str, steps: list[StepResult] | None = None) -> ExecutionOutcome:
        return cls(path=path, status=OutcomeStatus.FAILED, error=error, steps=tuple(steps or []))


class BatchResult(BaseModel):
    outcomes: list[ExecutionOutcome] = Field(default_factory=list)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def processed(self) -> int:
        return self._count(OutcomeStatus.SUCCEEDED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)


StepRecorder = Callable[[StepResult], None]
