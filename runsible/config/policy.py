"""Policy document loading and validation.

A policy document is a YAML mapping::

    settings:
      host: build01
      retries: 1
    runlist:
      - command: make deploy
        on_failure: rollback
    rollback:
      - command: make rollback

``settings`` configures the run, ``runlist`` is the default runlist, and
every other top-level key is an alternate runlist that ``on_failure`` can
name.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from runsible.config.settings import Settings
from runsible.errors import PolicyError
from runsible.models import CommandSpec, parse_failure_policy

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"
DEFAULT_RUNLIST_KEY = "runlist"

Runlist = tuple[CommandSpec, ...]


@dataclass(frozen=True)
class PolicyDocument:
    """Settings plus the runlists that escalation can look up by name."""

    settings: Settings = field(default_factory=Settings)
    runlists: Mapping[str, Runlist] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def empty(cls) -> "PolicyDocument":
        """Return a document with no runlists to escalate into."""
        return cls()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PolicyDocument":
        """Validate an already-parsed document.

        Args:
            data: Top-level mapping, or None for an empty document

        Returns:
            PolicyDocument with every runlist parsed

        Raises:
            PolicyError: If any section is malformed
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise PolicyError(
                f"policy document must be a mapping, got {type(data).__name__}"
            )

        settings = Settings.from_mapping(data.get(SETTINGS_KEY))
        runlists = {
            str(name): parse_runlist(str(name), entries)
            for name, entries in data.items()
            if name != SETTINGS_KEY
        }
        logger.debug("Parsed policy with runlists: %s", ", ".join(runlists) or "-")
        return cls(settings=settings, runlists=MappingProxyType(runlists))

    @property
    def default_runlist(self) -> Runlist:
        """The top-level runlist, empty when the document has none."""
        return self.runlists.get(DEFAULT_RUNLIST_KEY, ())

    def get(self, name: str) -> Runlist | None:
        """Look up a runlist by name."""
        return self.runlists.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.runlists

    def __iter__(self) -> Iterator[str]:
        return iter(self.runlists)


def parse_runlist(name: str, entries: Any) -> Runlist:
    """Parse one runlist section into CommandSpecs, preserving order."""
    if entries is None:
        return ()
    if not isinstance(entries, list):
        raise PolicyError(f"{name} must be a list of commands")
    return tuple(
        parse_command(f"{name}[{index}]", entry)
        for index, entry in enumerate(entries)
    )


def parse_command(where: str, entry: Any) -> CommandSpec:
    """Parse one runlist entry.

    Args:
        where: Location used in error messages, e.g. ``runlist[2]``
        entry: Raw mapping with command/retries/on_failure

    Raises:
        PolicyError: If the entry is malformed
    """
    if not isinstance(entry, Mapping):
        raise PolicyError(f"{where} must be a mapping")

    command = entry.get("command")
    if command is not None and not isinstance(command, str):
        # YAML reads unquoted false/true/123 as non-strings
        raise PolicyError(
            f"{where}: command must be a string, got {command!r} "
            "(quote YAML booleans and numbers)"
        )
    if not command or not command.strip():
        raise PolicyError(f"{where}: command is required")

    retries = entry.get("retries")
    if retries is not None and (
        not isinstance(retries, int) or isinstance(retries, bool) or retries < 0
    ):
        raise PolicyError(f"{where}: retries must be a non-negative integer")

    on_failure = entry.get("on_failure")
    if on_failure is not None and not isinstance(on_failure, str):
        raise PolicyError(f"{where}: on_failure must be a string")

    return CommandSpec(
        command=command,
        retries=retries,
        on_failure=parse_failure_policy(on_failure),
    )


def load_policy(path: Path | str) -> PolicyDocument:
    """Read and validate a YAML policy document.

    Raises:
        OSError: If the file cannot be read
        PolicyError: If the YAML is invalid or the document is malformed
    """
    path = Path(path)
    logger.debug("Reading policy from %s", path)
    text = path.read_text()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PolicyError(f"invalid YAML in {path}: {e}") from e
    return PolicyDocument.from_mapping(data)
