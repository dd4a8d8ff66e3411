"""Runtime options from environment variables.

Centralized environment variable parsing and validation for the knobs
that do not belong in a policy document.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class RuntimeOptions:
    """Process-level options.

    Handles parsing, validation, and defaults for all RUNSIBLE_* env vars.
    """

    # Retry backoff between attempts of one command
    retry_delay: float = field(default=2.0)

    # SSH
    connect_timeout: int = field(default=10)
    known_hosts: str | None = field(default=None)

    # Email alerts
    smtp_host: str = field(default="localhost")
    smtp_port: int = field(default=25)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "RuntimeOptions":
        """Load options from environment variables.

        Returns:
            RuntimeOptions instance with values from environment
        """
        return cls(
            retry_delay=cls._get_float("RUNSIBLE_RETRY_DELAY", 2.0),
            connect_timeout=cls._get_int("RUNSIBLE_CONNECT_TIMEOUT", 10),
            known_hosts=cls._get_known_hosts(),
            smtp_host=os.getenv("RUNSIBLE_SMTP_HOST", "localhost"),
            smtp_port=cls._get_int("RUNSIBLE_SMTP_PORT", 25),
            log_level=os.getenv("RUNSIBLE_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("RUNSIBLE_LOG_COLORS", True),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_float(key: str, default: float) -> float:
        """Get non-negative float from environment."""
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = float(value)
        except ValueError:
            logger.warning("Invalid float for %s: %s, using default %s", key, value, default)
            return default
        if parsed < 0:
            logger.warning("%s must be >= 0, got %s. Using default: %s", key, value, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_known_hosts() -> str | None:
        """Resolve the known_hosts file used for host key verification.

        Environment: RUNSIBLE_KNOWN_HOSTS
        Default: ~/.ssh/known_hosts if it exists, otherwise verification off
        Special value: "none" disables verification

        Returns:
            Path to known_hosts file or None if verification is disabled
        """
        value = os.getenv("RUNSIBLE_KNOWN_HOSTS", "").strip()

        if value.lower() == "none":
            logger.warning(
                "SSH host key verification DISABLED (RUNSIBLE_KNOWN_HOSTS=none)"
            )
            return None

        if value:
            custom_path = Path(os.path.expanduser(value))
            if not custom_path.exists():
                raise FileNotFoundError(
                    f"RUNSIBLE_KNOWN_HOSTS points at a missing file: {custom_path}"
                )
            return str(custom_path)

        default = Path.home() / ".ssh" / "known_hosts"
        if not default.exists():
            logger.warning(
                "No %s found, SSH host key verification disabled", default
            )
            return None
        return str(default)
