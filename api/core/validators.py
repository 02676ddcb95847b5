"""
Input validators shared by the feature services.

All functions are pure: they either return a cleaned value or raise
`core.errors.ValidationError`.
"""

from __future__ import annotations

import re
from typing import Any

from core.errors import AuthorizationError, ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# >= 8 chars, at least one lowercase, one uppercase, one digit and one special.
PASSWORD_PATTERN = re.compile(
    r'^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[!@#$%^&*(),.?":{}|<>]).{8,}$'
)
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one uppercase "
    "letter, one lowercase letter, one number, and one special character."
)
MAX_PASSWORD_BYTES = 72


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: dict[str, Any], message: str | None = None) -> None:
    """
    Raise ValidationError naming the first missing/blank field.
    """
    missing = [name for name, value in values.items() if is_blank(value)]
    if not missing:
        return None
    if message is None:
        message = f"Missing required field(s): {', '.join(missing)}."
    raise ValidationError(message, field=missing[0])


def clean_text(value: str | None, field: str) -> str:
    """
    Trim a required text value; blank values are rejected.
    """
    if is_blank(value):
        raise ValidationError(f"{field} is required.", field=field)
    return str(value).strip()


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: str | None) -> bool:
    return bool(EMAIL_PATTERN.match((email or "").strip()))


def is_strong_password(password: str | None) -> bool:
    return bool(PASSWORD_PATTERN.match(password or ""))


def validate_email(email: str | None) -> str:
    """
    Return the normalized email or raise ValidationError.
    """
    if not is_valid_email(email):
        raise ValidationError("Invalid email format.", field="email")
    return normalize_email(email)


def validate_password(password: str | None) -> str:
    if not is_strong_password(password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE, field="password")
    # bcrypt only looks at the first 72 bytes.
    if len(str(password).encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.", field="password")
    return str(password)


def ensure_owner(owner_id: Any, acting_user_id: Any, message: str) -> None:
    """
    Ownership check: the acting user must be the recorded author.
    """
    if acting_user_id is None or str(owner_id) != str(acting_user_id):
        raise AuthorizationError(message)
