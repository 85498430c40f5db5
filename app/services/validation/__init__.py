"""Input validation shared by the auth, profile and feedback services.

Validators never stop at the first problem: they return every violated rule,
in a fixed order, so callers can report them together.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any


EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
_EMAIL_RE = re.compile(EMAIL_PATTERN)

MIN_NAME_LENGTH = 2
MIN_MESSAGE_LENGTH = 5
MIN_PASSWORD_LENGTH = 6
RATING_RANGE = (1, 5)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid_email(email: Any) -> bool:
    return isinstance(email, str) and bool(_EMAIL_RE.match(email.strip()))


def normalize_email(email: str) -> str:
    return email.strip().lower()


def parse_rating(rating: Any) -> int | None:
    """Coerce a rating to int, or None when it is not a whole number.

    Accepts ints, integral floats and numeric strings ("4", "4.0").
    """
    if rating is None or isinstance(rating, bool):
        return None
    if isinstance(rating, str):
        try:
            rating = float(rating.strip())
        except ValueError:
            return None
    if isinstance(rating, float):
        if not rating.is_integer():
            return None
        return int(rating)
    if isinstance(rating, int):
        return rating
    return None


def parse_date(value: Any) -> date | None:
    """Parse an ISO date (YYYY-MM-DD, a trailing time part is ignored)."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def _text_length(value: Any) -> int:
    return len(value.strip()) if isinstance(value, str) else 0


def validate_feedback(name: Any, email: Any, rating: Any, message: Any) -> list[str]:
    errors: list[str] = []

    if _text_length(name) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters")

    if not is_valid_email(email):
        errors.append("Valid email is required")

    value = parse_rating(rating)
    low, high = RATING_RANGE
    if value is None or not low <= value <= high:
        errors.append(f"Rating must be between {low} and {high}")

    if _text_length(message) < MIN_MESSAGE_LENGTH:
        errors.append(f"Message must be at least {MIN_MESSAGE_LENGTH} characters")

    return errors


def validate_signup(name: Any, email: Any, password: Any, confirm_password: Any) -> list[str]:
    errors: list[str] = []

    missing = [
        label
        for label, value in (
            ("Name", name),
            ("Email", email),
            ("Password", password),
            ("Confirm password", confirm_password),
        )
        if is_blank(value)
    ]
    if missing:
        errors.append(f"{', '.join(missing)} required")

    if not is_blank(email) and not is_valid_email(email):
        errors.append("Valid email is required")

    if not is_blank(password):
        if len(password) < MIN_PASSWORD_LENGTH:
            errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if not is_blank(confirm_password) and password != confirm_password:
            errors.append("Passwords do not match")

    return errors


def validate_signin(email: Any, password: Any) -> list[str]:
    errors: list[str] = []
    if is_blank(email):
        errors.append("Email required")
    elif not is_valid_email(email):
        errors.append("Valid email is required")
    if is_blank(password):
        errors.append("Password required")
    return errors


PROFILE_FIELDS = (
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("email", "Email"),
    ("address", "Address"),
    ("bio", "Bio"),
    ("dob", "Date of birth"),
    ("mobile", "Mobile"),
)


def validate_profile(fields: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    missing = [label for key, label in PROFILE_FIELDS if is_blank(fields.get(key))]
    if missing:
        errors.append("All fields are mandatory: " + ", ".join(missing))

    email = fields.get("email")
    if not is_blank(email) and not is_valid_email(email):
        errors.append("Valid email is required")

    dob = fields.get("dob")
    if not is_blank(dob) and parse_date(dob) is None:
        errors.append("Date of birth must be a valid date (YYYY-MM-DD)")

    return errors
