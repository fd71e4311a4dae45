"""
Domain-specific validators and rule factories.

Covers the institutional email, password strength, phone number and
name checks used by the login, registration, profile and ride request forms.
"""

import re
from datetime import datetime
from typing import Optional

from .models import FieldRule

INSTITUTIONAL_DOMAIN = "purdue.edu"

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PURDUE_EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@purdue\.edu$", re.IGNORECASE)
PHONE_REGEX = re.compile(r"^\d{10}$")
PASSWORD_REGEX = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$"
)
NAME_REGEX = re.compile(r"^[a-zA-Z\s'-]{2,50}$")

SPECIAL_CHARACTERS = "@$!%*?&"

VALIDATION_MESSAGES = {
    "REQUIRED": "This field is required",
    "INVALID_EMAIL": "Please enter a valid email address",
    "INVALID_PURDUE_EMAIL": "Please use a valid Purdue email address (@purdue.edu)",
    "INVALID_PHONE": "Please enter a valid 10-digit phone number",
    "INVALID_PASSWORD": (
        "Password must be at least 8 characters and include uppercase, "
        "lowercase, number, and special character"
    ),
    "PASSWORDS_DONT_MATCH": "Passwords do not match",
    "INVALID_NAME": "Please enter a valid name (2-50 characters, letters only)",
}

PASSWORD_STRENGTH_LABELS = ["Very Weak", "Weak", "Fair", "Good", "Strong"]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_REGEX.match(email.strip()))


def is_purdue_email(email: str, domain: str = INSTITUTIONAL_DOMAIN) -> bool:
    """Check basic email shape plus the institutional domain suffix."""
    if not EMAIL_REGEX.match(email):
        return False
    return email.lower().endswith(f"@{domain.lower()}")


def clean_phone_number(phone: str) -> str:
    """Strip everything except digits."""
    return re.sub(r"\D", "", phone)


def is_valid_phone_number(phone: str) -> bool:
    """Exactly 10 digits once formatting characters are removed."""
    return bool(PHONE_REGEX.match(clean_phone_number(phone)))


def format_phone_number(phone: str) -> str:
    """Format a 10-digit number as (XXX) XXX-XXXX; leave anything else as is."""
    digits = clean_phone_number(phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    return phone


def is_valid_password(password: str) -> bool:
    """
    Check password strength requirements.

    - At least 8 characters
    - Contains an uppercase letter
    - Contains a lowercase letter
    - Contains a digit
    - Contains a special character from @$!%*?&
    """
    return bool(PASSWORD_REGEX.match(password))


def is_valid_name(name: str) -> bool:
    return bool(NAME_REGEX.match(name.strip()))


def passwords_match(password: str, confirm_password: str) -> bool:
    return password == confirm_password


def get_password_strength(password: str) -> int:
    """Score a password from 0 (very weak) to 4 (strong)."""
    score = 0
    if len(password) >= 8:
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"\d", password):
        score += 1
    if re.search(f"[{re.escape(SPECIAL_CHARACTERS)}]", password):
        score += 1
    return min(score, 4)


def get_password_strength_label(password: str) -> str:
    return PASSWORD_STRENGTH_LABELS[get_password_strength(password)]


# Rule factories


def required_rule(message: str = VALIDATION_MESSAGES["REQUIRED"]) -> FieldRule:
    return FieldRule(required=True, error_message=message)


def purdue_email_rule(
    message: str = "Please enter a valid Purdue email address",
    domain: str = INSTITUTIONAL_DOMAIN,
) -> FieldRule:
    return FieldRule(
        required=True,
        pattern=EMAIL_REGEX,
        validate=lambda value, _: (
            is_purdue_email(value, domain) or "Please use a valid Purdue email address"
        ),
        error_message=message,
    )


def password_rule(message: str = VALIDATION_MESSAGES["INVALID_PASSWORD"]) -> FieldRule:
    return FieldRule(
        required=True,
        min_length=8,
        pattern=PASSWORD_REGEX,
        error_message=message,
    )


def confirm_password_rule(
    password_field: str = "password",
    message: str = "Passwords must match",
) -> FieldRule:
    """Cross-field rule: the value must equal the password field."""
    return FieldRule(
        required=True,
        validate=lambda value, values: (
            passwords_match(values.get(password_field), value)
            or VALIDATION_MESSAGES["PASSWORDS_DONT_MATCH"]
        ),
        error_message=message,
    )


def phone_rule(message: str = VALIDATION_MESSAGES["INVALID_PHONE"]) -> FieldRule:
    return FieldRule(
        required=True,
        validate=lambda value, _: is_valid_phone_number(str(value)),
        error_message=message,
    )


def name_rule(message: Optional[str] = None, field_label: str = "Name") -> FieldRule:
    return FieldRule(
        required=True,
        min_length=2,
        max_length=50,
        pattern=NAME_REGEX,
        error_message=message or f"{field_label} is required",
    )


def passenger_count_rule() -> FieldRule:
    return FieldRule(
        required=True,
        validate=lambda value, _: (
            _passenger_count_in_range(value) or "Passenger count must be between 1 and 4"
        ),
        error_message="Please enter a valid passenger count (1-4)",
    )


def _passenger_count_in_range(value) -> bool:
    try:
        return 1 <= int(value) <= 4
    except (TypeError, ValueError):
        return False


def parse_datetime(value) -> Optional[datetime]:
    """Accept a datetime or an ISO 8601 string; None if neither."""
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def requested_time_rule(message: str = "Please choose a valid pickup time") -> FieldRule:
    return FieldRule(
        required=True,
        validate=lambda value, _: parse_datetime(value) is not None,
        error_message=message,
    )
