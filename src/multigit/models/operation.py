from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from multigit.engine.error_policies import ErrorPolicy

DEFAULT_REMOTE = "origin"


class ActionKind(str, Enum):
    DELETE_LOCAL = "delete-local"
    DELETE_REMOTE = "delete-remote"
    DELETE_BOTH = "delete-both"
    CREATE = "create"
    CHECKOUT = "checkout"

    @property
    def needs_base(self) -> bool:
        # delete-local must not be sitting on the branch it removes
        return self in (ActionKind.DELETE_LOCAL, ActionKind.DELETE_BOTH, ActionKind.CREATE)


def _require_text(value: str, what: str) -> str:
    if not value.strip():
        raise ValueError(f"{what} is empty")
    return value


class OperationConfig(BaseModel):
    """Settings for one branch-lifecycle run; read-only once built."""

    model_config = ConfigDict(frozen=True)

    branch: str
    action: ActionKind
    remote: str = DEFAULT_REMOTE
    fetch: bool = True
    pull: bool = False
    force_clean: bool = False
    push: bool = False
    error_policy: ErrorPolicy = ErrorPolicy.KEEP_GOING

    @field_validator("branch")
    @classmethod
    def _branch_not_empty(cls, v: str) -> str:
        return _require_text(v, "Branch name")

    @field_validator("remote")
    @classmethod
    def _remote_not_empty(cls, v: str) -> str:
        return _require_text(v, "Remote name")


class CommitPublishConfig(BaseModel):
    """Settings for one stage/commit/publish run; read-only once built."""

    model_config = ConfigDict(frozen=True)

    branch: str
    message: str
    selectors: tuple[str, ...] = Field(min_length=1)
    remote: str = DEFAULT_REMOTE
    error_policy: ErrorPolicy = ErrorPolicy.KEEP_GOING

    @field_validator("branch")
    @classmethod
    def _branch_not_empty(cls, v: str) -> str:
        return _require_text(v, "Branch name")

    @field_validator("message")
    @classmethod
    def _message_not_empty(cls, v: str) -> str:
        return _require_text(v, "Commit message")

    @field_validator("remote")
    @classmethod
    def _remote_not_empty(cls, v: str) -> str:
        return _require_text(v, "Remote name")
