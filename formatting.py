from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from schemas import FormattedNotification, SanitizedInquiry

# Japan has no daylight saving time, a fixed offset is exact.
JST = timezone(timedelta(hours=9), "JST")

PROGRAM_LABELS: Dict[str, str] = {
    "toddlers": "Toddlers (Ages 2-3)",
    "preschool": "Preschool (Ages 4-5)",
    "lower-elementary": "Lower Elementary (Ages 6-8)",
    "upper-elementary": "Upper Elementary (Ages 9-12)",
    "not-sure": "Not sure yet",
    "": "Not specified",
}

DEFAULT_MESSAGE = "No additional message provided."

TEMPLATE = """📚 *New Inquiry - Kumagaya Kids English*

👨‍👩‍👧 *Parent Information:*
• Name: {parent_name}
• Email: {email}
• Phone: {phone}

👶 *Child Information:*
• Name: {child_name}
• Age: {child_age} years old

📖 *Program Interest:*
{program_label}

💬 *Message:*
{message}

---
_Received at {received_at}_"""


def program_label(code: str) -> str:
    """Display label for a program code; unknown codes are shown as given."""
    return PROGRAM_LABELS.get(code, code)


def format_timestamp(moment: datetime) -> str:
    """Render a moment as Japanese-locale local time, e.g. 2024/1/5 9:04:05."""
    local = moment.astimezone(JST)
    return f"{local.year}/{local.month}/{local.day} {local.hour}:{local.minute:02d}:{local.second:02d}"


def format_inquiry(sanitized: SanitizedInquiry, now: Optional[datetime] = None) -> FormattedNotification:
    label = program_label(sanitized.preferred_program)
    message = sanitized.message or DEFAULT_MESSAGE
    received_at = format_timestamp(now or datetime.now(timezone.utc))

    text = TEMPLATE.format(
        parent_name=sanitized.parent_name,
        email=sanitized.email,
        phone=sanitized.phone,
        child_name=sanitized.child_name,
        child_age=sanitized.child_age,
        program_label=label,
        message=message,
        received_at=received_at,
    )
    data = sanitized.model_dump()
    data["message"] = message
    return FormattedNotification(**data, program_label=label, formatted_text=text)
