"""
Input validation for signup and login.

Pure functions, no I/O.  They run before any store or hasher call and
raise :class:`auth.errors.ValidationError` with a precise reason code.
"""

from __future__ import annotations

import re
from typing import Optional

from auth.errors import ValidationError

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    return email.lower()


def validate_email(email: Optional[str]) -> str:
    """Check presence and ``local@domain.tld`` shape; return the input unchanged."""
    if not email:
        raise ValidationError(
            "EMAIL_REQUIRED",
            "Please provide a valid email address",
            error="Email is required",
            field="email",
        )
    if not isinstance(email, str) or not _EMAIL_RE.fullmatch(email):
        raise ValidationError(
            "INVALID_EMAIL_FORMAT",
            "Please provide a valid email address (e.g., user@example.com)",
            error="Invalid email format",
            field="email",
        )
    return email


def _require_password(password: Optional[str]) -> str:
    if not password:
        raise ValidationError(
            "PASSWORD_REQUIRED",
            "Please provide a password",
            error="Password is required",
            field="password",
        )
    return password


def validate_signup_password(password: Optional[str]) -> str:
    """Presence plus length in ``[MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH]``."""
    password = _require_password(password)
    # Code points, not UTF-16 units: an emoji counts once here.
    length = len(password)

    if length < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "PASSWORD_TOO_SHORT",
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long. "
            f"Current length: {length}",
            error="Password is too short",
            field="password",
            meta={"minLength": MIN_PASSWORD_LENGTH, "currentLength": length},
        )
    if length > MAX_PASSWORD_LENGTH:
        raise ValidationError(
            "PASSWORD_TOO_LONG",
            f"Password must be no more than {MAX_PASSWORD_LENGTH} characters long. "
            f"Current length: {length}",
            error="Password is too long",
            field="password",
            meta={"maxLength": MAX_PASSWORD_LENGTH, "currentLength": length},
        )
    return password


def validate_login_password(password: Optional[str]) -> str:
    # Presence only: credentials created elsewhere may be shorter than the
    # signup minimum.
    return _require_password(password)


def validate_signup(email: Optional[str], password: Optional[str]) -> tuple[str, str]:
    return validate_email(email), validate_signup_password(password)


def validate_login(email: Optional[str], password: Optional[str]) -> tuple[str, str]:
    return validate_email(email), validate_login_password(password)
