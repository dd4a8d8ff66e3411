"""Protocol interfaces for the runlist engine's collaborators.

The engine never opens connections or delivers mail itself. It depends on
the two narrow capabilities below, which keeps it testable with fakes.

Usage Example:

    from runsible.protocols import RemoteSession

    async def my_function(session: RemoteSession):
        '''Function depends on protocol, not concrete implementation.'''
        code = await session.execute("uptime", sys.stdout, sys.stderr)

    # Can pass any implementation
    from runsible.services.session import SSHSession
    await my_function(SSHSession(conn))  # Works

    # Or a fake for testing
    class FakeSession:
        async def execute(self, command, stdout, stderr):
            return 0

    await my_function(FakeSession())  # Also works
"""

from typing import Protocol, TextIO, runtime_checkable


@runtime_checkable
class RemoteSession(Protocol):
    """Protocol for an already-connected remote session.

    Example implementation:
        class MySession:
            async def execute(self, command, stdout, stderr) -> int:
                # Start command, copy output as it arrives
                return exit_code
    """

    async def execute(
        self,
        command: str,
        stdout: TextIO,
        stderr: TextIO,
    ) -> int:
        """Execute one command on the remote host.

        Remote stdout and stderr are written to the given sinks as data
        arrives. Does not return until the exit status has been observed
        and all output has been written.

        Args:
            command: Shell command to run
            stdout: Sink for remote standard output
            stderr: Sink for remote standard error

        Returns:
            Remote exit code

        Raises:
            TransportError: If the remote side could not start the command
        """
        ...


@runtime_checkable
class AlertSender(Protocol):
    """Protocol for alert delivery.

    Example implementation:
        class PrintAlerts:
            def send(self, topic: str, body: str) -> None:
                print(f"[{topic}] {body}")
    """

    def send(self, topic: str, body: str) -> None:
        """Send one alert.

        Args:
            topic: Short subject line
            body: Alert text

        Raises:
            AlertBackendError: If the configured backend is not supported
        """
        ...


__all__ = [
    "AlertSender",
    "RemoteSession",
]
