"""Data models for Runsible."""

from runsible.models.command import (
    CommandSpec,
    Continue,
    EscalateTo,
    Exit,
    FailurePolicy,
    parse_failure_policy,
)
from runsible.models.outcome import (
    CommandFailure,
    ExecutionOutcome,
    Success,
    TransportFailure,
)

__all__ = [
    "CommandFailure",
    "CommandSpec",
    "Continue",
    "EscalateTo",
    "ExecutionOutcome",
    "Exit",
    "FailurePolicy",
    "Success",
    "TransportFailure",
    "parse_failure_policy",
]
