from __future__ import annotations

from enum import Enum


class ErrorPolicy(str, Enum):
    KEEP_GOING = "keep_going"
    STOP_ON_ERROR = "stop_on_error"

    @property
    def halts_on_failure(self) -> bool:
        return self is ErrorPolicy.STOP_ON_ERROR
