from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest

from src.employee_management.employee_management.container import build_container_for
from src.employee_management.employee_management.core.exceptions import ConflictOnWriteError
from src.employee_management.employee_management.employees.mapper import EmployeeMapper
from src.employee_management.employee_management.employees.model import EmployeeRecord
from src.employee_management.employee_management.employees.service import EmployeeService


class TickingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)):
        self._now = start
        self._step = step

    def __call__(self) -> datetime:
        self._now += self._step
        return self._now


class InMemoryEmployeeRepository:
    """Dict-backed store honoring the same contract as the MySQL repository."""

    def __init__(self, clock=None):
        self._rows: dict[int, EmployeeRecord] = {}
        self._next_id = 1
        self._clock = clock or TickingClock(datetime(2026, 1, 1, 9, 0, 0))
        self.transactions: list[bool] = []
        self.saved: list[EmployeeRecord] = []

    @contextmanager
    def transaction(self, *, read_only: bool = False):
        self.transactions.append(read_only)
        snapshot = (dict(self._rows), self._next_id)
        try:
            yield
        except Exception:
            self._rows, self._next_id = snapshot
            raise

    def _email_taken(self, email: Optional[str], exclude_id: Optional[int]) -> bool:
        if not email:
            return False
        return any(
            r.email and r.email.lower() == email.lower() and r.employee_id != exclude_id for r in self._rows.values()
        )

    def save(self, record: EmployeeRecord) -> EmployeeRecord:
        # UNIQUE(email) like the real table.
        if self._email_taken(record.email, record.employee_id):
            raise ConflictOnWriteError(f"{record.email} is already registered", field="email", value=record.email)

        now = self._clock()
        if record.employee_id is None:
            stored = replace(record, employee_id=self._next_id, created_at=now, updated_at=now)
            self._next_id += 1
        else:
            current = self._rows[record.employee_id]
            stored = replace(record, created_at=current.created_at, updated_at=now)

        self._rows[stored.employee_id] = stored
        self.saved.append(stored)
        return stored

    def insert_raw(self, record: EmployeeRecord) -> EmployeeRecord:
        """Test helper: store a record bypassing the service."""
        return self.save(record)

    def find_by_id(self, employee_id: int) -> Optional[EmployeeRecord]:
        return self._rows.get(int(employee_id))

    def find_all(self):
        return [self._rows[k] for k in sorted(self._rows)]

    def delete_by_id(self, employee_id: int) -> bool:
        return self._rows.pop(int(employee_id), None) is not None

    def exists_by_id(self, employee_id: int) -> bool:
        return int(employee_id) in self._rows

    def find_by_email(self, email: str) -> Optional[EmployeeRecord]:
        for r in self.find_all():
            if r.email and r.email.lower() == email.lower():
                return r
        return None

    def search(self, term: str):
        t = term.lower()
        return [
            r
            for r in self.find_all()
            if t in r.first_name.lower() or t in r.last_name.lower() or (r.email and t in r.email.lower())
        ]

    def search_by_first_name(self, fragment: str):
        return [r for r in self.find_all() if fragment.lower() in r.first_name.lower()]

    def search_by_last_name(self, fragment: str):
        return [r for r in self.find_all() if fragment.lower() in r.last_name.lower()]

    def exists_by_email(self, email: str) -> bool:
        return self._email_taken(email, None)

    def exists_by_email_excluding_id(self, email: str, employee_id: int) -> bool:
        return self._email_taken(email, int(employee_id))

    def count(self) -> int:
        return len(self._rows)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 1, 9, 0, 0)


@pytest.fixture
def employees_repo(fixed_now) -> InMemoryEmployeeRepository:
    return InMemoryEmployeeRepository(TickingClock(fixed_now))


@pytest.fixture
def employee_service(employees_repo) -> EmployeeService:
    return EmployeeService(employees_repo, EmployeeMapper())


@pytest.fixture
def seeded_repo(employees_repo) -> InMemoryEmployeeRepository:
    employees_repo.insert_raw(EmployeeRecord(None, "Lokesh", "Gupta", "howtodoinjava@gmail.com"))
    employees_repo.insert_raw(EmployeeRecord(None, "John", "Doe", "xyz@email.com"))
    employees_repo.insert_raw(EmployeeRecord(None, "María", "García", "maria.garcia@company.com"))
    employees_repo.insert_raw(EmployeeRecord(None, "Pedro", "López", None))
    return employees_repo


@pytest.fixture
def app(monkeypatch, employees_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.employee_management.employee_management.main import create_app

    flask_app = create_app(container=build_container_for(employees_repo))
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
