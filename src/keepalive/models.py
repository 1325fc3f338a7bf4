from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class StepStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class StepResult(BaseModel):
    """
    Outcome of one keepalive step.

    Fields
    - step: step name ("heartbeat", "probe", "dispatch").
    - status: success, failure or skipped.
    - detail: error message, skip reason, or diagnostic response body.
    - http_status: status code observed, when a response was received.
    """

    step: str
    status: StepStatus
    detail: Optional[str] = None
    http_status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status is StepStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is StepStatus.FAILURE

    @property
    def skipped(self) -> bool:
        return self.status is StepStatus.SKIPPED

    @classmethod
    def success(cls, step: str, *, detail: Optional[str] = None, http_status: Optional[int] = None) -> "StepResult":
        return cls(step=step, status=StepStatus.SUCCESS, detail=detail, http_status=http_status)

    @classmethod
    def failure(cls, step: str, *, detail: Optional[str] = None, http_status: Optional[int] = None) -> "StepResult":
        return cls(step=step, status=StepStatus.FAILURE, detail=detail, http_status=http_status)

    @classmethod
    def skip(cls, step: str, reason: str) -> "StepResult":
        return cls(step=step, status=StepStatus.SKIPPED, detail=reason)


class RunReport(BaseModel):
    """Results of one run, in execution order."""

    started_at: datetime
    heartbeat: StepResult
    probe: StepResult
    dispatch: StepResult

    @property
    def steps(self) -> List[StepResult]:
        return [self.heartbeat, self.probe, self.dispatch]

    @property
    def failures(self) -> List[StepResult]:
        return [s for s in self.steps if s.failed]

    def to_summary(self) -> Dict[str, Any]:
        return {
            "ok": not self.failures,
            "started_at": self.started_at.isoformat(),
            "steps": {s.step: s.status.value for s in self.steps},
            "failures": len(self.failures),
        }
