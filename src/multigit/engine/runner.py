from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from multigit.engine.error_policies import ErrorPolicy
from multigit.models.outcome import (
    BatchResult,
    ExecutionOutcome,
    OutcomeStatus,
    StepRecorder,
    StepResult,
)
from multigit.workspace.backend import VersionControlBackend
from multigit.workspace.guard import RepositoryGuard, RepositorySkipped

logger = logging.getLogger(__name__)

RepositoryProcessor = Callable[[VersionControlBackend, StepRecorder], None]


class EventEmitter(Protocol):
    def emit(self, event_type: str, **data: Any) -> None: ...


class BatchAborted(Exception):
    """Raised under stop-on-error once a repository has failed."""

    def __init__(self, outcome: ExecutionOutcome, result: BatchResult) -> None:
        self.outcome = outcome
        self.result = result
        super().__init__(f"Stopped at {outcome.path}: {outcome.error}")


class BatchRunner:
    """Run one processor over every repository in a list, strictly in order.

    Each entry goes guard -> processor inside its own failure boundary. The
    error policy only decides what happens after a failure has been recorded:
    keep going, or raise :class:`BatchAborted`.
    """

    def __init__(
        self,
        processor: RepositoryProcessor,
        guard: RepositoryGuard,
        event_emitter: EventEmitter,
        policy: ErrorPolicy = ErrorPolicy.KEEP_GOING,
    ) -> None:
        self._processor = processor
        self._guard = guard
        self._emitter = event_emitter
        self._policy = policy

    def run(self, entries: Iterable[str]) -> BatchResult:
        result = BatchResult()
        start = time.monotonic()

        for raw_path in entries:
            outcome = self.process_one(raw_path)
            result.outcomes.append(outcome)
            self._report(outcome)
            if outcome.status == OutcomeStatus.FAILED and self._policy.halts_on_failure:
                self._emitter.emit(
                    "BatchAborted",
                    path=outcome.path,
                    error=outcome.error,
                    processed=result.processed,
                    skipped=result.skipped,
                )
                raise BatchAborted(outcome, result)

        self._emitter.emit(
            "BatchCompleted",
            processed=result.processed,
            skipped=result.skipped,
            failed=result.failed,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return result

    def process_one(self, raw_path: str) -> ExecutionOutcome:
        steps: list[StepResult] = []

        def record(step: StepResult) -> None:
            steps.append(step)
            self._emitter.emit(
                "RepoStepCompleted",
                path=raw_path,
                step=step.step,
                status=step.status.value,
                message=step.message,
            )

        try:
            checked = self._guard.check(raw_path)
            if isinstance(checked, ExecutionOutcome):
                return checked
            self._emitter.emit("RepoStarted", path=raw_path)
            self._processor(checked.backend, record)
        except RepositorySkipped as e:
            return ExecutionOutcome.skipped(raw_path, e.reason)
        except Exception as e:
            logger.debug("Processing %s failed", raw_path, exc_info=True)
            return ExecutionOutcome.failed(raw_path, str(e) or type(e).__name__, steps)

        return ExecutionOutcome.succeeded(raw_path, steps)

    def _report(self, outcome: ExecutionOutcome) -> None:
        if outcome.status == OutcomeStatus.SKIPPED:
            self._emitter.emit("RepoSkipped", path=outcome.path, reason=outcome.detail)
        elif outcome.status == OutcomeStatus.FAILED:
            self._emitter.emit("RepoFailed", path=outcome.path, error=outcome.error)
        else:
            self._emitter.emit("RepoProcessed", path=outcome.path, steps=len(outcome.steps))
