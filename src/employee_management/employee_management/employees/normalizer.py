"""Deterministic rewriting of name/email fields applied before every write."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from .model import EmployeeRecord


def capitalize_name(value: Optional[str]) -> Optional[str]:
    """Trim, then upper-case the first letter and lower-case the rest."""
    if value is None:
        return None
    text = value.strip()
    if not text:
        return text
    return text[:1].upper() + text[1:].lower()


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Trim and lower-case; a blank address becomes None (no email)."""
    if value is None:
        return None
    text = value.strip().lower()
    return text or None


def normalize_record(record: EmployeeRecord) -> EmployeeRecord:
    return replace(
        record,
        first_name=capitalize_name(record.first_name),
        last_name=capitalize_name(record.last_name),
        email=normalize_email(record.email),
    )
