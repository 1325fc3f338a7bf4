"""
Scheduled keepalive runner.

Modules:
- config: environment-driven run configuration
- models: per-step outcomes and the run report
- steps: heartbeat write, health probe, self-dispatch
- handler: driver and CLI entry point
"""

from .config import KeepaliveConfig
from .models import RunReport, StepResult, StepStatus

__all__ = ["KeepaliveConfig", "RunReport", "StepResult", "StepStatus"]
