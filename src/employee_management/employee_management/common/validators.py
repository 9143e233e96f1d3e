from __future__ import annotations

from typing import Optional

import email_validator
from email_validator import EmailNotValidError, validate_email

from ..core.exceptions import InvalidArgumentError

# Intranet addresses such as ana@corp.local or root@localhost are valid for employees.
INTRANET_DOMAIN_NAMES = ("local", "localhost", "test")

for _name in INTRANET_DOMAIN_NAMES:
    if _name in email_validator.SPECIAL_USE_DOMAIN_NAMES:
        email_validator.SPECIAL_USE_DOMAIN_NAMES.remove(_name)


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if is_blank(value):
        raise InvalidArgumentError(f"{field_name} must not be empty", field=field_name, value=value)
    return value.strip()


def require_positive_id(value: Optional[int], field_name: str = "id") -> int:
    if value is None:
        raise InvalidArgumentError(f"{field_name} must not be null", field=field_name, value=value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field_name} must be a whole number", field=field_name, value=value)
    if value <= 0:
        raise InvalidArgumentError(f"{field_name} must be greater than 0", field=field_name, value=value)
    return value


def check_length(value: str, field_name: str, *, min_len: int = 0, max_len: Optional[int] = None) -> Optional[str]:
    """Return an error message when ``value`` is outside the allowed length, else None."""
    if len(value) < min_len:
        return f"{field_name} must have at least {min_len} characters"
    if max_len is not None and len(value) > max_len:
        return f"{field_name} must not exceed {max_len} characters"
    return None


def check_email_syntax(value: str) -> Optional[str]:
    """Return an error message when ``value`` is not a syntactically valid address, else None."""
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return f"{value} is not a valid email address"
    return None
