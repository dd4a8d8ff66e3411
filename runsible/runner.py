"""Library entry points: connect, then run a policy document's runlist."""

import logging
from pathlib import Path

from runsible.config import PolicyDocument, RuntimeOptions, Settings, load_policy
from runsible.context import RunContext
from runsible.services.output import OutputSinks
from runsible.services.runlist import RunlistResult, run_runlist
from runsible.services.session import open_session

logger = logging.getLogger(__name__)


async def ssh_runlist(
    settings: Settings,
    policy: PolicyDocument,
    options: RuntimeOptions | None = None,
    sinks: OutputSinks | None = None,
) -> RunlistResult:
    """Open one SSH session and run the policy's default runlist.

    Args:
        settings: Resolved settings (CLI overrides already applied)
        policy: Policy document providing the runlists
        options: Runtime options (default: from environment)
        sinks: Output streams (default: process stdout/stderr)

    Returns:
        Result of the default runlist

    Raises:
        ConnectError: If the SSH connection cannot be established
        RunAborted: If a command ultimately failed
    """
    options = options or RuntimeOptions.from_env()
    async with open_session(settings, options) as session:
        ctx = RunContext.create(session, settings, options=options, sinks=sinks)
        return await run_runlist(ctx, policy.default_runlist, policy)


async def run_yaml(
    path: Path | str,
    options: RuntimeOptions | None = None,
) -> RunlistResult:
    """Run a YAML policy file without any command line overrides."""
    policy = load_policy(path)
    return await ssh_runlist(policy.settings, policy, options=options)
