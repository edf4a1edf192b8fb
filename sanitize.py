"""Input cleaners applied to inquiry fields after validation. All are pure and never raise."""

import re
from typing import Any

_ANGLE_BRACKETS = re.compile(r"[<>]")
_PHONE_DISALLOWED = re.compile(r"[^0-9+\-() ]")

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_HTML_RESERVED = re.compile(r"[&<>\"']")


def sanitize_text(value: Any) -> str:
    """Trim, drop angle brackets and entity-escape the HTML reserved characters.

    Anything that is not a string becomes an empty string.
    """
    if not isinstance(value, str):
        return ""
    text = _ANGLE_BRACKETS.sub("", value.strip())
    return _HTML_RESERVED.sub(lambda m: _HTML_ESCAPES[m.group(0)], text)


def sanitize_phone(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _PHONE_DISALLOWED.sub("", value)


def sanitize_email(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()
