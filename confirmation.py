"""
Confirmation emails sent to the parent after an inquiry is accepted.

The handler only depends on the ConfirmationSender protocol. By default the
email is simulated (logged, short delay, always successful); when SMTP_HOST
is configured SmtpConfirmationSender delivers it for real.
"""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

from config import Settings
from schemas import DeliveryResult

log = logging.getLogger(__name__)

SUBJECT = "Thank you for your inquiry - Kumagaya Kids English"


def confirmation_body(child_name: str) -> str:
    return (
        "Dear Parent, Thank you for your interest in Kumagaya Kids English. "
        f"We have received your inquiry for {child_name} and will contact you within 24 hours."
    )


class ConfirmationSender(Protocol):
    async def send_confirmation(self, email: str, child_name: str) -> DeliveryResult:
        ...


class SimulatedConfirmationSender:
    """Stand-in for a real email service: logs the message and reports success."""

    def __init__(self, delay_s: float = 0.5):
        self.delay_s = delay_s

    async def send_confirmation(self, email: str, child_name: str) -> DeliveryResult:
        log.info("[SIMULATED] Sending confirmation email to %s", email)
        log.info("[SIMULATED] Subject: %s", SUBJECT)
        log.info("[SIMULATED] Body: %s", confirmation_body(child_name))
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        return DeliveryResult.delivered()


class SmtpConfirmationSender:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _build_message(self, email: str, child_name: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = SUBJECT
        msg["From"] = formataddr((self.settings.from_name, self.settings.sender_address()))
        msg["To"] = email
        msg.attach(MIMEText(confirmation_body(child_name), "plain", "utf-8"))
        return msg

    def _send(self, email: str, child_name: str) -> None:
        s = self.settings
        msg = self._build_message(email, child_name)
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=15) as server:
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls()
                server.ehlo()
            if s.smtp_user and s.smtp_pass:
                server.login(s.smtp_user, s.smtp_pass)
            server.sendmail(s.sender_address(), [email], msg.as_string())

    async def send_confirmation(self, email: str, child_name: str) -> DeliveryResult:
        try:
            await asyncio.to_thread(self._send, email, child_name)
        except (smtplib.SMTPException, OSError) as e:
            log.warning("Confirmation email to %s failed: %s", email, e)
            return DeliveryResult.failed(f"exc={type(e).__name__}")
        return DeliveryResult.delivered()


def build_confirmation_sender(settings: Settings) -> ConfirmationSender:
    if settings.smtp_host:
        return SmtpConfirmationSender(settings)
    return SimulatedConfirmationSender(delay_s=settings.confirmation_delay_s)
