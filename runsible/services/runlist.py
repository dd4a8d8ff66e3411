"""Runlist execution with retries, alerting, and escalation.

Per command::

    Pending -> Attempting(i) -> Success | Attempting(i+1) | Exhausted
    Exhausted -> ContinueNextCommand | AbortRun | EscalateThenAbortRun

Escalation runs the named runlist with an empty lookup table and
escalation disabled, so failure handlers are never more than one level
deep.
"""

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from runsible.config.policy import PolicyDocument, Runlist
from runsible.errors import RunAborted
from runsible.models import Success
from runsible.services.escalation import Abort, ContinueRun, Escalate, resolve
from runsible.services.retry import run_with_retries

if TYPE_CHECKING:
    from runsible.context import RunContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunlistResult:
    """Outcome of one runlist.

    ``failed_command`` is set when the runlist was aborted.
    """

    executed: int
    failed_command: str | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.failed_command is None


def fatal_topic() -> str:
    return f"runsible:fatal:{os.getpid()}"


async def execute_runlist(
    ctx: "RunContext",
    runlist: Runlist,
    policy: PolicyDocument,
    allow_escalation: bool = True,
) -> RunlistResult:
    """Run each entry of runlist in order.

    Args:
        ctx: Session, settings, alerts, and output streams for the run
        runlist: Entries to run
        policy: Runlists that on_failure may name
        allow_escalation: False when running a failure handler

    Returns:
        RunlistResult; not ok if an entry was aborted or escalated
    """
    executed = 0
    for entry in runlist:
        retries = entry.effective_retries(ctx.settings.retries)
        outcome = await run_with_retries(
            ctx.session,
            entry.command,
            retries,
            ctx.sinks,
            retry_delay=ctx.retry_delay,
        )
        executed += 1
        if isinstance(outcome, Success):
            continue

        decision = resolve(
            outcome,
            entry,
            policy,
            ctx.alerts,
            ctx.sinks,
            allow_escalation=allow_escalation,
        )

        if isinstance(decision, ContinueRun):
            logger.info("Continuing after %r failed", entry.command)
            continue

        if isinstance(decision, Escalate):
            ctx.sinks.warn(f"found {decision.name} runlist")
            handler = await execute_runlist(
                ctx,
                decision.runlist,
                PolicyDocument.empty(),
                allow_escalation=False,
            )
            if not handler.ok:
                logger.warning(
                    "Failure handler %s stopped at %r", decision.name, handler.failed_command
                )
            ctx.sinks.warn(f"exiting failure after {decision.name}")
            return RunlistResult(
                executed=executed,
                failed_command=entry.command,
                reason=f"escalated to {decision.name}",
            )

        if isinstance(decision, Abort):
            return RunlistResult(
                executed=executed,
                failed_command=entry.command,
                reason=decision.reason,
            )

        raise TypeError(f"unhandled decision: {decision!r}")

    return RunlistResult(executed=executed)


async def run_runlist(
    ctx: "RunContext",
    runlist: Runlist,
    policy: PolicyDocument,
) -> RunlistResult:
    """Run the top-level runlist and fail the run if it aborts.

    Raises:
        RunAborted: After warning and sending the fatal alert
    """
    result = await execute_runlist(ctx, runlist, policy)
    if result.ok:
        logger.info("Runlist completed (%d command(s))", result.executed)
        return result

    message = f"exiting after `{result.failed_command}` ultimately failed"
    ctx.sinks.warn(message)
    ctx.alerts.send(fatal_topic(), message)
    raise RunAborted(message, command=result.failed_command)
