"""Local output sinks for remote streams and engine warnings."""

import sys
from dataclasses import dataclass, field
from typing import TextIO


@dataclass
class OutputSinks:
    """Where remote output and engine warnings are written.

    Remote stdout goes to ``stdout`` and remote stderr to ``stderr``.
    Banners and warnings go to both so either stream alone shows where
    each command's output begins and ends.
    """

    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    stderr: TextIO = field(default_factory=lambda: sys.stderr)

    def warn(self, message: str) -> None:
        """Write a line to both streams."""
        for stream in (self.stdout, self.stderr):
            stream.write(f"{message}\n")
            stream.flush()
