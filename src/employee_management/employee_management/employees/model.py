from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional, Union


def _full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
    return f"{first_name or ''} {last_name or ''}".strip()


def _initials(first_name: Optional[str], last_name: Optional[str]) -> str:
    first = first_name[0].upper() if first_name else ""
    last = last_name[0].upper() if last_name else ""
    return first + last


def _has_email(email: Optional[str]) -> bool:
    return bool(email and email.strip())


@dataclass(frozen=True)
class EmployeeRecord:
    """Domain entity: an employee as persisted in the store.

    Note: Pure data object (no DB access code). ``employee_id`` and the
    timestamps are owned by the store and stay None on a draft that has not
    been saved yet.
    """

    employee_id: Optional[int]
    first_name: str
    last_name: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return _full_name(self.first_name, self.last_name)

    @property
    def initials(self) -> str:
        return _initials(self.first_name, self.last_name)

    @property
    def has_email(self) -> bool:
        return _has_email(self.email)


@dataclass(frozen=True)
class NewEmployee:
    """Identity of an employee that has not been persisted yet."""


@dataclass(frozen=True)
class ExistingEmployee:
    """Identity of an employee already stored under ``employee_id``."""

    employee_id: int


EmployeeIdentity = Union[NewEmployee, ExistingEmployee]


@dataclass(frozen=True)
class EmployeeDto:
    """Transport shape exchanged with controllers and templates.

    Mirrors :class:`EmployeeRecord` field by field but carries no storage
    behavior, so it can describe an employee that does not exist yet.
    """

    employee_id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return _full_name(self.first_name, self.last_name)

    @property
    def initials(self) -> str:
        return _initials(self.first_name, self.last_name)

    @property
    def has_email(self) -> bool:
        return _has_email(self.email)

    @property
    def is_new(self) -> bool:
        return self.employee_id is None

    @property
    def identity(self) -> EmployeeIdentity:
        if self.employee_id is None:
            return NewEmployee()
        return ExistingEmployee(int(self.employee_id))

    def with_first_name(self, first_name: Optional[str]) -> "EmployeeDto":
        return replace(self, first_name=first_name)

    def with_last_name(self, last_name: Optional[str]) -> "EmployeeDto":
        return replace(self, last_name=last_name)

    def with_email(self, email: Optional[str]) -> "EmployeeDto":
        return replace(self, email=email)

    def to_display_string(self) -> str:
        if self.has_email:
            return f"{self.full_name} ({self.email})"
        return self.full_name


@dataclass(frozen=True)
class EmployeeStatistics:
    """Read-model for the statistics page."""

    total: int
    with_email: int
    without_email: int
    percentage_with_email: float

    @property
    def percentage_label(self) -> str:
        return f"{self.percentage_with_email:.1f}"
