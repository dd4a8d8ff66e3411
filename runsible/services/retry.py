"""Run one command with bounded retries."""

import asyncio
import logging

from runsible.errors import TransportError
from runsible.models import (
    CommandFailure,
    ExecutionOutcome,
    Success,
    TransportFailure,
)
from runsible.protocols import RemoteSession
from runsible.services.banners import begin_banner, end_banner
from runsible.services.output import OutputSinks

logger = logging.getLogger(__name__)

DEFAULT_RETRY_DELAY = 2.0


async def run_with_retries(
    session: RemoteSession,
    command: str,
    retries: int,
    sinks: OutputSinks,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> ExecutionOutcome:
    """Run command up to retries + 1 times until it exits 0.

    One begin banner is written before the first attempt and one end
    banner after the last, whatever the outcome. A transport error ends
    the sequence at once and is not retried.

    Args:
        session: Connected remote session
        command: Shell command to run
        retries: Extra attempts allowed after the first (>= 0)
        sinks: Local output streams
        retry_delay: Seconds to sleep before each retry

    Returns:
        Success, CommandFailure (after the final attempt), or TransportFailure
    """
    if retries < 0:
        raise ValueError(f"retries must be >= 0, got {retries}")

    sinks.warn(begin_banner(command))
    try:
        exit_code = -1
        for attempt in range(retries + 1):
            if attempt > 0:
                await asyncio.sleep(retry_delay)
                sinks.warn(f"retry {attempt}")

            try:
                exit_code = await session.execute(command, sinks.stdout, sinks.stderr)
            except TransportError as e:
                logger.error("Transport failure running %r: %s", command, e)
                return TransportFailure(command=command, retries=retries, error=e)

            if exit_code == 0:
                logger.debug("%r succeeded on attempt %d", command, attempt + 1)
                return Success(command=command, attempts=attempt + 1)

            logger.info(
                "%r exited %d (attempt %d/%d)",
                command,
                exit_code,
                attempt + 1,
                retries + 1,
            )

        return CommandFailure(command=command, retries=retries, exit_code=exit_code)
    finally:
        sinks.warn(end_banner(command))
