"""Alert delivery for unrecoverable failures.

The backend is chosen by ``settings.alerts['backend']``:

- missing or ``disabled``: the alert is only written to stdout/stderr
- ``email``: sent over SMTP to ``alerts['to']`` (or ``alerts['address']``)
- ``kafka``, ``slack``: recognised but not supported yet
- anything else: configuration error
"""

import logging
import smtplib
from collections.abc import Mapping
from email.mime.text import MIMEText
from typing import Any

from runsible.errors import AlertBackendError
from runsible.services.output import OutputSinks

logger = logging.getLogger(__name__)

DEFAULT_FROM = "runsible@spoon"
UNSUPPORTED_BACKENDS = ("kafka", "slack")


class AlertDispatcher:
    """Send alerts according to the run's alert configuration."""

    def __init__(
        self,
        config: Mapping[str, Any] | None,
        sinks: OutputSinks,
        smtp_host: str = "localhost",
        smtp_port: int = 25,
    ) -> None:
        """Initialize dispatcher.

        Args:
            config: The ``alerts`` settings mapping (empty or None disables)
            sinks: Streams used for disabled/undeliverable alerts
            smtp_host: SMTP relay for the email backend
            smtp_port: SMTP relay port
        """
        self.config = dict(config or {})
        self.sinks = sinks
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port

    @property
    def backend(self) -> str | None:
        return self.config.get("backend")

    def send(self, topic: str, body: str) -> None:
        """Send one alert.

        Delivery failures are logged and not retried.

        Raises:
            AlertBackendError: If the backend is unsupported or unknown
        """
        backend = self.backend
        if not backend or backend == "disabled":
            self.sinks.warn(f"(DISABLED) ALERT: [{topic}] {body}")
            return

        if backend == "email":
            self._send_email(topic, body)
        elif backend in UNSUPPORTED_BACKENDS:
            raise AlertBackendError(f"unsupported backend: {backend!r}")
        else:
            raise AlertBackendError(f"unknown backend: {backend!r}")

    def _send_email(self, topic: str, body: str) -> None:
        """Deliver an alert by email."""
        address = self.config.get("to") or self.config.get("address")
        if not address:
            self.sinks.warn(repr(self.config))
            self.sinks.warn(f"(NO_ADDRESS) ALERT: [{topic}] {body}")
            return

        sender = self.config.get("from") or DEFAULT_FROM
        msg = MIMEText(body, "plain")
        msg["Subject"] = topic
        msg["From"] = sender
        msg["To"] = address

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.sendmail(sender, [address], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Failed to email alert [%s] to %s via %s:%d: %s",
                topic,
                address,
                self.smtp_host,
                self.smtp_port,
                e,
            )
            return

        logger.info("Alert [%s] emailed to %s", topic, address)
