from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Event(BaseModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    event_type: str


class BatchStarted(Event):
    event_type: str = "BatchStarted"
    operation: str
    branch: str
    list_file: str = ""


class RepoStarted(Event):
    event_type: str = "RepoStarted"
    path: str


class RepoStepCompleted(Event):
    event_type: str = "RepoStepCompleted"
    path: str
    step: str
    status: str = "done"
    message: str = ""


class RepoSkipped(Event):
    event_type: str = "RepoSkipped"
    path: str
    reason: str = ""


class RepoProcessed(Event):
    event_type: str = "RepoProcessed"
    path: str
    steps: int = 0


class RepoFailed(Event):
    event_type: str = "RepoFailed"
    path: str
    error: str = ""


class BatchCompleted(Event):
    event_type: str = "BatchCompleted"
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    duration_ms: int = 0


class BatchAborted(Event):
    event_type: str = "BatchAborted"
    path: str
    error: str = ""
    processed: int = 0
    skipped: int = 0


EVENT_TYPE_MAP: dict[str, type[Event]] = {
    "BatchStarted": BatchStarted,
    "RepoStarted": RepoStarted,
    "RepoStepCompleted": RepoStepCompleted,
    "RepoSkipped": RepoSkipped,
    "RepoProcessed": RepoProcessed,
    "RepoFailed": RepoFailed,
    "BatchCompleted": BatchCompleted,
    "BatchAborted": BatchAborted,
}
