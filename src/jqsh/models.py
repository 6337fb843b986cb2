"""Result models for subprocess executions."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ExecStatus(str, Enum):
    SUCCESS = "success"
    EXITED = "exited"  # ran but exited nonzero
    CANCELLED = "cancelled"
    LAUNCH_FAILED = "launch-failed"


class ExecResult(BaseModel):
    """Byte counts and completion status of one jq execution."""

    bytes_out: int = 0
    bytes_err: int = 0
    status: ExecStatus = ExecStatus.SUCCESS
    returncode: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ExecStatus.SUCCESS

    def describe(self) -> str:
        if self.status is ExecStatus.EXITED:
            return f"exit status {self.returncode}"
        if self.status is ExecStatus.CANCELLED:
            return "killed"
        if self.status is ExecStatus.LAUNCH_FAILED:
            return self.error or "failed to start"
        return "exit status 0"


__all__ = ["ExecResult", "ExecStatus"]
