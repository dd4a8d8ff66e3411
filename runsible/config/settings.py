"""Run settings resolved from the policy document and CLI overrides."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from runsible.errors import PolicyError

logger = logging.getLogger(__name__)


def _default_user() -> str:
    return os.getenv("USER", "root")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one run.

    Built once before the engine starts and never mutated afterwards.
    Only the user/host/port/retries fields can be overridden from the
    command line.
    """

    user: str = field(default_factory=_default_user)
    host: str = "127.0.0.1"
    port: int = 22
    retries: int = 0
    vars: tuple[str, ...] = ()
    alerts: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or isinstance(self.port, bool):
            raise PolicyError(f"settings.port must be an integer, got {self.port!r}")
        if (
            not isinstance(self.retries, int)
            or isinstance(self.retries, bool)
            or self.retries < 0
        ):
            raise PolicyError(
                f"settings.retries must be a non-negative integer, got {self.retries!r}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "Settings":
        """Build settings from a policy document's settings section.

        Missing keys fall back to the defaults. ``vars`` may be a list of
        names or a whitespace-separated string.

        Args:
            data: The ``settings`` mapping, or None

        Returns:
            Settings with defaults applied

        Raises:
            PolicyError: If the section is not a mapping or holds bad values
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise PolicyError(f"settings must be a mapping, got {type(data).__name__}")

        defaults = cls()
        alerts = data.get("alerts") or {}
        if not isinstance(alerts, Mapping):
            raise PolicyError("settings.alerts must be a mapping")

        settings = cls(
            user=str(data.get("user") or defaults.user),
            host=str(data.get("host") or defaults.host),
            port=data.get("port") or defaults.port,
            retries=data.get("retries") or defaults.retries,
            vars=_parse_vars(data.get("vars")),
            alerts=MappingProxyType(dict(alerts)),
        )
        logger.debug(
            "Settings resolved: %s@%s:%d retries=%d vars=%s",
            settings.user,
            settings.host,
            settings.port,
            settings.retries,
            list(settings.vars),
        )
        return settings

    def with_overrides(
        self,
        user: str | None = None,
        host: str | None = None,
        port: int | None = None,
        retries: int | None = None,
    ) -> "Settings":
        """Return a copy with every override that is set applied."""
        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("user", user),
                ("host", host),
                ("port", port),
                ("retries", retries),
            )
            if value is not None
        }
        return replace(self, **changes) if changes else self

    def silenced(self) -> "Settings":
        """Return a copy with alerting disabled."""
        return replace(self, alerts=MappingProxyType({}))


def _parse_vars(value: Any) -> tuple[str, ...]:
    """Normalize the vars setting to a tuple of names."""
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, list | tuple):
        return tuple(str(v) for v in value)
    raise PolicyError(f"settings.vars must be a list or string, got {value!r}")
