"""Explicit dependency container for one run.

Everything the engine needs is passed down through a RunContext; there
is no module-level state.
"""

from dataclasses import dataclass, field

from runsible.config import RuntimeOptions, Settings
from runsible.protocols import AlertSender, RemoteSession
from runsible.services.alerts import AlertDispatcher
from runsible.services.output import OutputSinks
from runsible.services.retry import DEFAULT_RETRY_DELAY


@dataclass(frozen=True)
class RunContext:
    """Collaborators shared by every command of one run.

    Example:
        ctx = RunContext.create(session, settings)
        await run_runlist(ctx, policy.default_runlist, policy)
    """

    session: RemoteSession
    settings: Settings
    alerts: AlertSender
    sinks: OutputSinks = field(default_factory=OutputSinks)
    retry_delay: float = DEFAULT_RETRY_DELAY

    @classmethod
    def create(
        cls,
        session: RemoteSession,
        settings: Settings,
        options: RuntimeOptions | None = None,
        sinks: OutputSinks | None = None,
    ) -> "RunContext":
        """Create a context with an AlertDispatcher built from settings.

        Args:
            session: Connected remote session
            settings: Resolved run settings
            options: Runtime options (default: from environment)
            sinks: Output streams (default: process stdout/stderr)

        Returns:
            Initialized RunContext
        """
        options = options or RuntimeOptions.from_env()
        sinks = sinks or OutputSinks()
        alerts = AlertDispatcher(
            settings.alerts,
            sinks,
            smtp_host=options.smtp_host,
            smtp_port=options.smtp_port,
        )
        return cls(
            session=session,
            settings=settings,
            alerts=alerts,
            sinks=sinks,
            retry_delay=options.retry_delay,
        )
