from __future__ import annotations

import smtplib

from config import Settings
from confirmation import (
    SimulatedConfirmationSender,
    SmtpConfirmationSender,
    build_confirmation_sender,
)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.sent = []
        self.logged_in = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def ehlo(self):
        return (250, b"ok")

    def has_extn(self, name):
        return name == "starttls"

    def starttls(self):
        return (220, b"ready")

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, sender, recipients, message):
        self.sent.append((sender, recipients, message))


def test_factory_picks_simulated_without_smtp(settings) -> None:
    sender = build_confirmation_sender(settings)
    assert isinstance(sender, SimulatedConfirmationSender)
    assert sender.delay_s == 0


def test_factory_picks_smtp_when_configured() -> None:
    s = Settings(_env_file=None, smtp_host="smtp.example.com")
    assert isinstance(build_confirmation_sender(s), SmtpConfirmationSender)


async def test_simulated_sender_always_succeeds(caplog) -> None:
    caplog.set_level("INFO", logger="confirmation")
    result = await SimulatedConfirmationSender(delay_s=0).send_confirmation(
        "a@example.com", "Tom Doe"
    )
    assert result.ok
    assert "a@example.com" in caplog.text
    assert "Tom Doe" in caplog.text


async def test_smtp_sender_sends_acknowledgment(monkeypatch) -> None:
    FakeSMTP.instances.clear()
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    s = Settings(
        _env_file=None,
        smtp_host="smtp.example.com",
        smtp_user="bot@example.com",
        smtp_pass="pw",
    )

    result = await SmtpConfirmationSender(s).send_confirmation("a@example.com", "Tom Doe")

    assert result.ok
    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.logged_in == ("bot@example.com", "pw")
    sender, recipients, message = server.sent[0]
    assert sender == "bot@example.com"
    assert recipients == ["a@example.com"]
    assert "Thank you for your inquiry" in message


async def test_smtp_failure_is_reported(monkeypatch) -> None:
    def refuse(*args, **kwargs):
        raise ConnectionRefusedError("no smtp here")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    s = Settings(_env_file=None, smtp_host="smtp.example.com")

    result = await SmtpConfirmationSender(s).send_confirmation("a@example.com", "Tom Doe")

    assert not result.ok
    assert result.error == "exc=ConnectionRefusedError"
