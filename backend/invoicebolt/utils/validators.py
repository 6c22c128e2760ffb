"""
Validators — input normalization shared by request schemas and services.
"""
import re

from email_validator import EmailNotValidError, validate_email


def normalize_email(email: str | None) -> str:
    """Validate an email address and return it lowercased.

    Raises:
        ValueError: if the address is malformed.
    """
    if not email or not email.strip():
        raise ValueError("Invalid email")
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email") from exc
    return result.normalized.lower()


def is_honeypot_triggered(value: str | None) -> bool:
    """A non-blank hidden field means the form was filled by a bot.

    Whitespace-only values do not count: browser autofill and form
    serializers can leave stray spaces in hidden inputs, and a real visitor
    must never be silently dropped.
    """
    return bool(value and value.strip())


def clean_optional(value: str | None, max_length: int = 256) -> str | None:
    """Strip, collapse whitespace and truncate an optional free-text value."""
    if value is None:
        return None
    cleaned = re.sub(r"\s+", " ", value).strip()
    return cleaned[:max_length] or None
