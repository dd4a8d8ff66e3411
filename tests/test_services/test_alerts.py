"""Tests for the alert dispatcher."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from runsible.errors import AlertBackendError
from runsible.services.alerts import DEFAULT_FROM, AlertDispatcher


@pytest.mark.parametrize("config", [None, {}, {"backend": "disabled"}])
def test_disabled_backend_writes_to_streams(sinks, config) -> None:
    """Without a backend the alert is only written locally."""
    dispatcher = AlertDispatcher(config, sinks)

    dispatcher.send("exec failure", "body")

    expected = "(DISABLED) ALERT: [exec failure] body"
    assert expected in sinks.stdout.getvalue()
    assert expected in sinks.stderr.getvalue()


def test_email_without_address_is_reported(sinks) -> None:
    """Email backend with no recipient warns instead of sending."""
    dispatcher = AlertDispatcher({"backend": "email"}, sinks)

    with patch("runsible.services.alerts.smtplib.SMTP") as smtp:
        dispatcher.send("topic", "body")

    smtp.assert_not_called()
    assert "(NO_ADDRESS) ALERT: [topic] body" in sinks.stdout.getvalue()


def test_email_sends_message(sinks) -> None:
    """Email backend delivers through the configured SMTP relay."""
    dispatcher = AlertDispatcher(
        {"backend": "email", "to": "ops@example.com"},
        sinks,
        smtp_host="mail.example.com",
        smtp_port=2525,
    )

    with patch("runsible.services.alerts.smtplib.SMTP") as smtp:
        dispatcher.send("exec failure", "{'cmd': 'false'}")

    smtp.assert_called_once_with("mail.example.com", 2525)
    server = smtp.return_value.__enter__.return_value
    server.sendmail.assert_called_once()
    sender, recipients, message = server.sendmail.call_args[0]
    assert sender == DEFAULT_FROM
    assert recipients == ["ops@example.com"]
    assert "Subject: exec failure" in message


def test_email_uses_address_and_from(sinks) -> None:
    """'address' is accepted as the recipient and 'from' overrides the sender."""
    dispatcher = AlertDispatcher(
        {"backend": "email", "address": "a@example.com", "from": "bot@example.com"},
        sinks,
    )

    with patch("runsible.services.alerts.smtplib.SMTP") as smtp:
        dispatcher.send("t", "b")

    server = smtp.return_value.__enter__.return_value
    sender, recipients, _ = server.sendmail.call_args[0]
    assert sender == "bot@example.com"
    assert recipients == ["a@example.com"]


def test_email_delivery_failure_is_logged_not_raised(sinks, caplog) -> None:
    """SMTP errors are logged and swallowed."""
    dispatcher = AlertDispatcher({"backend": "email", "to": "ops@example.com"}, sinks)

    with patch(
        "runsible.services.alerts.smtplib.SMTP",
        side_effect=smtplib.SMTPConnectError(421, "busy"),
    ):
        dispatcher.send("t", "b")

    assert "Failed to email alert" in caplog.text


def test_email_socket_failure_is_logged_not_raised(sinks) -> None:
    """Connection refused does not block termination."""
    dispatcher = AlertDispatcher({"backend": "email", "to": "ops@example.com"}, sinks)

    with patch(
        "runsible.services.alerts.smtplib.SMTP",
        side_effect=ConnectionRefusedError(),
    ):
        dispatcher.send("t", "b")


@pytest.mark.parametrize("backend", ["kafka", "slack"])
def test_unsupported_backend_raises(sinks, backend: str) -> None:
    """Known but unimplemented backends fail loudly."""
    dispatcher = AlertDispatcher({"backend": backend}, sinks)

    with pytest.raises(AlertBackendError, match="unsupported backend"):
        dispatcher.send("t", "b")


def test_unknown_backend_raises(sinks) -> None:
    """Unrecognised backends fail loudly."""
    dispatcher = AlertDispatcher({"backend": "pager"}, sinks)

    with pytest.raises(AlertBackendError, match="unknown backend"):
        dispatcher.send("t", "b")


def test_dispatcher_satisfies_protocol(sinks) -> None:
    from runsible.protocols import AlertSender

    assert isinstance(AlertDispatcher(None, sinks), AlertSender)
    assert isinstance(MagicMock(spec=AlertDispatcher), AlertSender)
