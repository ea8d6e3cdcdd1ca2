from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel

from multigit.engine.error_policies import ErrorPolicy
from multigit.models.operation import DEFAULT_REMOTE

CONFIG_FILE_NAME = "multigit.yaml"
REMOTE_ENV_VAR = "MULTIGIT_REMOTE"


class MultigitConfig(BaseModel):
    """Defaults applied when a flag is not given on the command line."""

    remote: str = DEFAULT_REMOTE
    fetch: bool = True
    pull: bool = False
    push: bool = False
    error_policy: ErrorPolicy = ErrorPolicy.KEEP_GOING


def _find_config_file(start: Path | None = None) -> Path | None:
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_config(start: Path | None = None) -> MultigitConfig:
    config_path = _find_config_file(start)

    if config_path is not None:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        config = MultigitConfig.model_validate(raw)
    else:
        config = MultigitConfig()

    remote_env = os.environ.get(REMOTE_ENV_VAR)
    if remote_env:
        config.remote = remote_env

    return config
