from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class InvalidArgumentError(DomainError):
    """Raised when input data is missing, malformed or violates a domain rule.

    Always raised before anything is written to the store.
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[object] = None,
        errors: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message)
        self.field = field
        self.value = value
        self.errors = dict(errors or {})


class EmployeeNotFoundError(DomainError):
    """Raised when an operation addresses an employee id that does not exist."""

    def __init__(self, employee_id: Optional[int], message: Optional[str] = None):
        super().__init__(message or f"Employee with id {employee_id} was not found")
        self.employee_id = employee_id

    @property
    def has_employee_id(self) -> bool:
        return self.employee_id is not None


class ConflictOnWriteError(DomainError):
    """Raised when the store rejects a write on a uniqueness constraint.

    This happens when two writers race past the application-level check.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, value: Optional[object] = None):
        super().__init__(message)
        self.field = field
        self.value = value


class UnexpectedStoreError(DomainError):
    """Raised for any other failure coming from the store (connectivity, SQL errors, ...)."""
