"""Timestamped delimiters around a command's output."""

from datetime import datetime

MARKER = "RUNSIBLE"
TIMESTAMP_FORMAT = "%b%d %H:%M:%S"  # Mar05 13:45:22


def timestamp(t: datetime | None = None) -> str:
    """Format t (default: now) for a banner."""
    return (t or datetime.now()).strftime(TIMESTAMP_FORMAT)


def begin_banner(label: str, t: datetime | None = None) -> str:
    """Delimit the beginning of command output."""
    return f">>> {MARKER} [{timestamp(t)}] {label} >>>"


def end_banner(label: str, t: datetime | None = None) -> str:
    """Delimit the end of command output."""
    return f"<<< {MARKER} [{timestamp(t)}] {label} <<<"
