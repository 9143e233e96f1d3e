from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import TransactionScope, db_cursor, db_transaction, fetchall, fetchone, like_pattern
from .model import EmployeeRecord
from .repository import EmployeeRepository

_COLUMNS = "employee_id, first_name, last_name, email, created_at, updated_at"


def _to_record(row: Dict[str, Any]) -> EmployeeRecord:
    return EmployeeRecord(
        employee_id=int(row["employee_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row.get("email"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._scope = TransactionScope()

    @contextmanager
    def transaction(self, *, read_only: bool = False) -> Iterator[None]:
        with db_transaction(self._conn_factory, self._scope, read_only=read_only):
            yield

    def _cursor(self):
        return db_cursor(self._conn_factory, scope=self._scope)

    def _select_one(self, where: str, params: tuple) -> Optional[EmployeeRecord]:
        with self._cursor() as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where}", params)
            row = fetchone(cur)
            return _to_record(row) if row else None

    def _select_many(self, where: str = "", params: tuple = (), order_by: str = "employee_id ASC") -> Sequence[EmployeeRecord]:
        sql = f"SELECT {_COLUMNS} FROM employees"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order_by}"
        with self._cursor() as (_, cur):
            cur.execute(sql, params)
            return [_to_record(r) for r in fetchall(cur)]

    def save(self, record: EmployeeRecord) -> EmployeeRecord:
        with self._cursor() as (_, cur):
            if record.employee_id is None:
                cur.execute(
                    """
                    INSERT INTO employees(first_name, last_name, email, created_at, updated_at)
                    VALUES(%s,%s,%s,CURRENT_TIMESTAMP(6),CURRENT_TIMESTAMP(6))
                    """,
                    (record.first_name, record.last_name, record.email),
                )
                employee_id = int(cur.lastrowid)
            else:
                # created_at is never part of the SET list.
                cur.execute(
                    """
                    UPDATE employees
                    SET first_name=%s, last_name=%s, email=%s, updated_at=CURRENT_TIMESTAMP(6)
                    WHERE employee_id=%s
                    """,
                    (record.first_name, record.last_name, record.email, int(record.employee_id)),
                )
                employee_id = int(record.employee_id)

            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            return _to_record(fetchone(cur))

    def find_by_id(self, employee_id: int) -> Optional[EmployeeRecord]:
        return self._select_one("employee_id=%s", (int(employee_id),))

    def find_all(self) -> Sequence[EmployeeRecord]:
        return self._select_many()

    def delete_by_id(self, employee_id: int) -> bool:
        with self._cursor() as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def exists_by_id(self, employee_id: int) -> bool:
        with self._cursor() as (_, cur):
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s LIMIT 1", (int(employee_id),))
            return fetchone(cur) is not None

    def find_by_email(self, email: str) -> Optional[EmployeeRecord]:
        return self._select_one("LOWER(email)=LOWER(%s)", (email,))

    def search(self, term: str) -> Sequence[EmployeeRecord]:
        pattern = like_pattern(term)
        return self._select_many(
            "LOWER(first_name) LIKE %s OR LOWER(last_name) LIKE %s OR LOWER(email) LIKE %s",
            (pattern, pattern, pattern),
        )

    def search_by_first_name(self, fragment: str) -> Sequence[EmployeeRecord]:
        return self._select_many("LOWER(first_name) LIKE %s", (like_pattern(fragment),))

    def search_by_last_name(self, fragment: str) -> Sequence[EmployeeRecord]:
        return self._select_many("LOWER(last_name) LIKE %s", (like_pattern(fragment),))

    def exists_by_email(self, email: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute("SELECT 1 AS found FROM employees WHERE LOWER(email)=LOWER(%s) LIMIT 1", (email,))
            return fetchone(cur) is not None

    def exists_by_email_excluding_id(self, email: str, employee_id: int) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM employees WHERE LOWER(email)=LOWER(%s) AND employee_id<>%s LIMIT 1",
                (email, int(employee_id)),
            )
            return fetchone(cur) is not None

    def count(self) -> int:
        with self._cursor() as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM employees")
            row = fetchone(cur)
            return int(row["total"]) if row else 0
