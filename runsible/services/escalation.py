"""Decide what happens after a command is exhausted."""

import logging
from dataclasses import dataclass

from runsible.config.policy import PolicyDocument, Runlist
from runsible.models import (
    CommandFailure,
    CommandSpec,
    Continue,
    EscalateTo,
    Exit,
    TransportFailure,
)
from runsible.protocols import AlertSender
from runsible.services.output import OutputSinks

logger = logging.getLogger(__name__)

EXEC_FAILURE_TOPIC = "exec failure"


@dataclass(frozen=True)
class ContinueRun:
    """Proceed to the next command in the current runlist."""


@dataclass(frozen=True)
class Abort:
    """Stop the current runlist; the run fails."""

    reason: str


@dataclass(frozen=True)
class Escalate:
    """Run the named failure handler, then abort."""

    name: str
    runlist: Runlist


Decision = ContinueRun | Abort | Escalate


def failure_body(entry: CommandSpec, retries: int) -> str:
    """Alert body describing an exhausted command."""
    return repr(
        {
            "cmd": entry.command,
            "retries": retries,
            "on_failure": str(entry.on_failure),
        }
    )


def resolve(
    outcome: CommandFailure | TransportFailure,
    entry: CommandSpec,
    policy: PolicyDocument,
    alerts: AlertSender,
    sinks: OutputSinks,
    allow_escalation: bool = True,
) -> Decision:
    """Alert on an exhausted command and map its on_failure to a Decision.

    The alert is sent exactly once, before the decision is made.

    Args:
        outcome: The terminal failure for this command
        entry: The runlist entry that failed
        policy: Runlists available for escalation
        alerts: Alert sender
        sinks: Local output streams for warnings
        allow_escalation: False inside a failure handler; named targets
            are then ignored so escalation never goes more than one level deep

    Returns:
        ContinueRun, Abort, or Escalate
    """
    logger.warning(
        "%r ultimately failed after %d retries (%s), on_failure=%s",
        outcome.command,
        outcome.retries,
        outcome.cause,
        entry.on_failure,
    )
    alerts.send(EXEC_FAILURE_TOPIC, failure_body(entry, outcome.retries))

    on_failure = entry.on_failure
    if isinstance(on_failure, Continue):
        return ContinueRun()

    if isinstance(on_failure, Exit):
        return Abort(reason=f"{entry.command} failed")

    if isinstance(on_failure, EscalateTo):
        if not allow_escalation:
            sinks.warn(f"{on_failure.name} ignored inside a failure handler")
            return Abort(reason=f"nested escalation to {on_failure.name} ignored")

        runlist = policy.get(on_failure.name)
        if runlist is None:
            sinks.warn(f"{on_failure.name} unknown")
            logger.error("on_failure names unknown runlist %r", on_failure.name)
            return Abort(reason=f"unknown on_failure target {on_failure.name}")
        return Escalate(name=on_failure.name, runlist=runlist)

    raise TypeError(f"unhandled failure policy: {on_failure!r}")
