"""
Declarative validation rules for the inquiry form.

Every field in FIELD_RULES is checked, in declaration order, so one bad
submission reports all of its problems at once. Inside a field the rules run
in order and the first failure is the one reported for that field.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from email_validator import EmailNotValidError, validate_email

from schemas import ValidationIssue

PROGRAM_CHOICES: Tuple[str, ...] = (
    "toddlers",
    "preschool",
    "lower-elementary",
    "upper-elementary",
    "not-sure",
    "",
)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
CHILD_AGE_MIN = 2
CHILD_AGE_MAX = 12
MESSAGE_MAX_LENGTH = 1000

# Latin letters, whitespace, hiragana, katakana and CJK ideographs
NAME_PATTERN = re.compile(r"^[a-zA-Z\s\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+$")
PHONE_PATTERN = re.compile(r"^[0-9+\-() ]{10,20}$")
# ASCII digits only; four digits bound int() conversion for any string input
_INT_STRING = re.compile(r"^[+-]?[0-9]{1,4}$")

# A rule returns True when the value passes.
Check = Callable[[Any], bool]


@dataclass(frozen=True)
class Rule:
    check: Check
    message: str


@dataclass(frozen=True)
class FieldRules:
    name: str
    rules: Sequence[Rule] = field(default_factory=tuple)
    optional: bool = False
    trim: bool = True


def _present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _length_between(lo: int, hi: int) -> Check:
    return lambda value: isinstance(value, str) and lo <= len(value) <= hi


def _matches(pattern: "re.Pattern[str]") -> Check:
    return lambda value: isinstance(value, str) and pattern.fullmatch(value) is not None


def _is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def coerce_int(value: Any) -> Optional[int]:
    """Integer value of an int, integral float or integer string; None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INT_STRING.fullmatch(value.strip()):
        return int(value.strip())
    return None


def _age_in_range(value: Any) -> bool:
    age = coerce_int(value)
    return age is not None and CHILD_AGE_MIN <= age <= CHILD_AGE_MAX


def _name_rules(label: str) -> Tuple[Rule, ...]:
    return (
        Rule(_present, f"{label} is required"),
        Rule(
            _length_between(NAME_MIN_LENGTH, NAME_MAX_LENGTH),
            f"{label} must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
        ),
        Rule(_matches(NAME_PATTERN), f"{label} contains invalid characters"),
    )


FIELD_RULES: Tuple[FieldRules, ...] = (
    FieldRules("parentName", _name_rules("Parent name")),
    FieldRules("childName", _name_rules("Child name")),
    FieldRules(
        "childAge",
        (Rule(_age_in_range, f"Child age must be between {CHILD_AGE_MIN} and {CHILD_AGE_MAX} years"),),
        trim=False,
    ),
    FieldRules(
        "email",
        (
            Rule(_present, "Email is required"),
            Rule(_is_email, "Please provide a valid email address"),
        ),
    ),
    FieldRules(
        "phone",
        (
            Rule(_present, "Phone number is required"),
            Rule(_matches(PHONE_PATTERN), "Please provide a valid phone number"),
        ),
    ),
    FieldRules(
        "preferredProgram",
        (Rule(lambda value: value in PROGRAM_CHOICES, "Invalid program selection"),),
        optional=True,
        trim=False,
    ),
    FieldRules(
        "message",
        (
            Rule(lambda value: isinstance(value, str), "Message must be text"),
            Rule(
                _length_between(0, MESSAGE_MAX_LENGTH),
                f"Message must not exceed {MESSAGE_MAX_LENGTH} characters",
            ),
        ),
        optional=True,
    ),
)


def _check_field(field_rules: FieldRules, payload: Mapping[str, Any]) -> Optional[ValidationIssue]:
    value = payload.get(field_rules.name)
    if field_rules.optional and value is None:
        return None
    if field_rules.trim and isinstance(value, str):
        value = value.strip()
    for rule in field_rules.rules:
        if not rule.check(value):
            return ValidationIssue(field=field_rules.name, message=rule.message)
    return None


def validate_inquiry(payload: Any) -> List[ValidationIssue]:
    """Return every validation issue for a raw inquiry payload, in field order.

    An empty list means the payload may be sanitized and relayed. Anything
    other than a mapping is treated as an empty submission.
    """
    if not isinstance(payload, Mapping):
        payload = {}
    issues: List[ValidationIssue] = []
    for field_rules in FIELD_RULES:
        issue = _check_field(field_rules, payload)
        if issue is not None:
            issues.append(issue)
    return issues
