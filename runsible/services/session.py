"""SSH session that streams remote output to local sinks."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TextIO

import asyncssh

from runsible.errors import TransportError

if TYPE_CHECKING:
    from runsible.config import RuntimeOptions, Settings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


class ConnectError(Exception):
    """Failed to establish the SSH connection."""

    def __init__(self, host_name: str, original_error: Exception):
        """Initialize connection error.

        Args:
            host_name: Host the connection was opened to
            original_error: Original exception that caused the failure
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host_name}: {original_error}")


async def _pump(reader: Any, sink: TextIO) -> None:
    """Copy a remote stream to a local sink until EOF."""
    while True:
        data = await reader.read(CHUNK_SIZE)
        if not data:
            break
        sink.write(data)
        sink.flush()


class SSHSession:
    """Run commands one at a time over an asyncssh connection."""

    def __init__(self, connection: "asyncssh.SSHClientConnection") -> None:
        self.connection = connection
        # Commands never overlap on one session
        self._lock = asyncio.Lock()

    async def execute(self, command: str, stdout: TextIO, stderr: TextIO) -> int:
        """Run command, streaming its output, and return its exit code.

        Raises:
            TransportError: If the channel or exec request is refused
        """
        async with self._lock:
            logger.debug("Executing %r", command)
            try:
                process = await self.connection.create_process(
                    command, encoding="utf-8", errors="replace"
                )
            except (asyncssh.Error, OSError) as e:
                raise TransportError(command, e) from e

            # The connection can drop while the command is running
            try:
                await asyncio.gather(
                    _pump(process.stdout, stdout),
                    _pump(process.stderr, stderr),
                )
                completed = await process.wait(check=False)
            except (asyncssh.Error, OSError) as e:
                raise TransportError(command, e) from e

            returncode = completed.returncode
            if returncode is None:
                logger.warning("No exit status received for %r", command)
                return -1
            return returncode


@asynccontextmanager
async def open_session(
    settings: "Settings",
    options: "RuntimeOptions",
) -> AsyncIterator[SSHSession]:
    """Connect to settings.host and yield a session.

    Agent forwarding is on and ``settings.vars`` are forwarded from the
    local environment.

    Raises:
        ConnectError: If the connection cannot be established
    """
    logger.info(
        "Opening SSH connection (%s@%s:%d)",
        settings.user,
        settings.host,
        settings.port,
    )
    connect_kwargs: dict[str, Any] = {
        "port": settings.port,
        "username": settings.user,
        "agent_forwarding": True,
        "known_hosts": options.known_hosts,
        "connect_timeout": options.connect_timeout,
    }
    if settings.vars:
        connect_kwargs["send_env"] = list(settings.vars)

    try:
        conn = await asyncssh.connect(settings.host, **connect_kwargs)
    except (asyncssh.Error, OSError, asyncio.TimeoutError) as e:
        logger.error("Connection to %s failed: %s", settings.host, e)
        raise ConnectError(settings.host, e) from e

    logger.info("SSH connection established to %s", settings.host)
    try:
        yield SSHSession(conn)
    finally:
        conn.close()
        await conn.wait_closed()
        logger.debug("Closed SSH connection to %s", settings.host)
