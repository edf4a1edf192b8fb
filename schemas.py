"""
Data models for the Kumagaya Kids English inquiry relay

Nothing here is persisted. Each model lives for the duration of one request:
the raw form payload is validated, turned into a SanitizedInquiry, formatted
into a FormattedNotification, handed to the notifier and then dropped.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    """A single field-level validation failure"""
    field: str = Field(..., description="Name of the offending form field")
    message: str = Field(..., description="Human readable explanation")


class SanitizedInquiry(BaseModel):
    """
    Inquiry after validation and sanitization.
    Text fields are HTML-escaped, the email is lower-cased.
    """
    model_config = ConfigDict(populate_by_name=True)

    parent_name: str = Field(..., alias="parentName")
    child_name: str = Field(..., alias="childName")
    child_age: int = Field(..., alias="childAge", ge=2, le=12)
    email: str
    phone: str
    preferred_program: str = Field("", alias="preferredProgram")
    message: str = ""


class FormattedNotification(SanitizedInquiry):
    """Sanitized inquiry plus the text that is relayed to Telegram"""
    program_label: str = Field(..., alias="programLabel")
    formatted_text: str = Field(..., alias="formattedText")


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a best-effort side effect. Failures are reported, never raised."""
    ok: bool
    error: Optional[str] = None

    @classmethod
    def delivered(cls) -> "DeliveryResult":
        return cls(ok=True)

    @classmethod
    def failed(cls, error: str) -> "DeliveryResult":
        return cls(ok=False, error=error)


# Response bodies

class InquiryAccepted(BaseModel):
    success: bool = True
    message: str


class InquiryRejected(BaseModel):
    success: bool = False
    error: str = "Validation failed"
    errors: List[ValidationIssue]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthStatus(BaseModel):
    status: str = "ok"
    timestamp: str
