from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from .model import EmployeeRecord


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Note (DIP): the service layer depends on this interface, never on a concrete DB.
    """

    def transaction(self, *, read_only: bool = False) -> ContextManager[None]:
        """Run every call made inside the ``with`` block as one unit of work."""

        raise NotImplementedError

    def save(self, record: EmployeeRecord) -> EmployeeRecord:
        """Insert (no id) or update (id) a record.

        Assigns the id on first save, sets ``created_at`` once and refreshes
        ``updated_at`` on every call. Returns the stored state.
        """

        raise NotImplementedError

    def find_by_id(self, employee_id: int) -> Optional[EmployeeRecord]:
        raise NotImplementedError

    def find_all(self) -> Sequence[EmployeeRecord]:
        """All records in insertion (id) order."""

        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def exists_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def find_by_email(self, email: str) -> Optional[EmployeeRecord]:
        raise NotImplementedError

    def search(self, term: str) -> Sequence[EmployeeRecord]:
        """Case-insensitive substring match on first name, last name or email."""

        raise NotImplementedError

    def search_by_first_name(self, fragment: str) -> Sequence[EmployeeRecord]:
        raise NotImplementedError

    def search_by_last_name(self, fragment: str) -> Sequence[EmployeeRecord]:
        raise NotImplementedError

    def exists_by_email(self, email: str) -> bool:
        raise NotImplementedError

    def exists_by_email_excluding_id(self, email: str, employee_id: int) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
