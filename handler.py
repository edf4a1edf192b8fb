import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from confirmation import ConfirmationSender
from formatting import format_inquiry
from notifier import TelegramNotifier
from sanitize import sanitize_email, sanitize_phone, sanitize_text
from schemas import ErrorResponse, InquiryAccepted, InquiryRejected, SanitizedInquiry
from validation import coerce_int, validate_inquiry

log = logging.getLogger(__name__)

ACCEPTED_MESSAGE = (
    "Thank you! Your inquiry has been received. We will contact you within 24 hours."
)
INTERNAL_ERROR_MESSAGE = "An internal server error occurred. Please try again later."


class Stage(str, Enum):
    RECEIVED = "received"
    VALIDATING = "validating"
    REJECTED = "rejected"
    SANITIZING = "sanitizing"
    FORMATTING = "formatting"
    NOTIFYING = "notifying"
    CONFIRMING = "confirming"
    RESPONDED = "responded"


@dataclass
class HandlerResponse:
    status_code: int
    body: Dict[str, Any]


def sanitize_inquiry(payload: Mapping[str, Any]) -> SanitizedInquiry:
    """Clean a payload that already passed validate_inquiry."""
    message = payload.get("message")
    return SanitizedInquiry(
        parent_name=sanitize_text(payload.get("parentName")),
        child_name=sanitize_text(payload.get("childName")),
        child_age=coerce_int(payload.get("childAge")),
        email=sanitize_email(payload.get("email")),
        phone=sanitize_phone(payload.get("phone")).strip(),
        preferred_program=payload.get("preferredProgram") or "",
        message=sanitize_text(message) if message else "",
    )


class InquiryHandler:
    """Runs one inquiry submission from validation to the HTTP response.

    Telegram delivery and the confirmation email are best-effort: their
    failures are logged and the caller still gets the acknowledgment.
    """

    def __init__(self, notifier: TelegramNotifier, confirmation_sender: ConfirmationSender):
        self.notifier = notifier
        self.confirmation_sender = confirmation_sender

    async def handle(self, payload: Any) -> HandlerResponse:
        stage = Stage.RECEIVED
        try:
            stage = Stage.VALIDATING
            issues = validate_inquiry(payload)
            if issues:
                stage = Stage.REJECTED
                log.info("Inquiry rejected: %s", ", ".join(i.field for i in issues))
                return HandlerResponse(400, InquiryRejected(errors=issues).model_dump())

            stage = Stage.SANITIZING
            sanitized = sanitize_inquiry(payload)

            stage = Stage.FORMATTING
            formatted = format_inquiry(sanitized)

            stage = Stage.NOTIFYING
            sent = await self.notifier.notify(formatted)
            if not sent.ok:
                log.error("Failed to send inquiry to Telegram: %s", sent.error)

            stage = Stage.CONFIRMING
            confirmed = await self.confirmation_sender.send_confirmation(
                sanitized.email, sanitized.child_name
            )
            if not confirmed.ok:
                log.error("Failed to send confirmation email: %s", confirmed.error)

            stage = Stage.RESPONDED
            return HandlerResponse(200, InquiryAccepted(message=ACCEPTED_MESSAGE).model_dump())
        except Exception:
            log.exception("Inquiry handling failed while %s", stage.value)
            return HandlerResponse(500, ErrorResponse(error=INTERNAL_ERROR_MESSAGE).model_dump())
