from __future__ import annotations

import re
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import mysql.connector

from ..core.constants import MYSQL_DUPLICATE_ENTRY
from ..core.exceptions import ConflictOnWriteError, UnexpectedStoreError
from .connection import DatabaseConnection

_DUPLICATE_RE = re.compile(r"Duplicate entry '(?P<value>.*)' for key '(?P<key>[^']*)'")


class TransactionScope:
    """Thread-local slot for the connection opened by :func:`db_transaction`.

    Flask serves requests on several threads, so each thread keeps its own
    open unit of work.
    """

    def __init__(self):
        self._local = threading.local()

    @property
    def connection(self):
        return getattr(self._local, "conn", None)

    def bind(self, conn) -> None:
        self._local.conn = conn

    def clear(self) -> None:
        self._local.conn = None


@contextmanager
def translate_store_errors() -> Iterator[None]:
    """Map mysql-connector errors onto the domain error taxonomy."""
    try:
        yield
    except mysql.connector.IntegrityError as exc:
        if exc.errno == MYSQL_DUPLICATE_ENTRY:
            m = _DUPLICATE_RE.search(exc.msg or "")
            value = m.group("value") if m else None
            key = m.group("key") if m else ""
            field = "email" if "email" in key.lower() else None
            raise ConflictOnWriteError(
                f"{value or 'Value'} is already registered, please retry with another value",
                field=field,
                value=value,
            ) from exc
        raise UnexpectedStoreError(str(exc)) from exc
    except mysql.connector.Error as exc:
        raise UnexpectedStoreError(str(exc)) from exc


@contextmanager
def db_transaction(conn_factory: DatabaseConnection, scope: TransactionScope, *, read_only: bool = False):
    """Open one connection for the whole block; commit on success, rollback on error.

    A nested call joins the transaction that is already open on this thread.
    """
    if scope.connection is not None:
        yield scope.connection
        return

    with translate_store_errors():
        conn = conn_factory.connect()
        try:
            conn.start_transaction(readonly=read_only)
            scope.bind(conn)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            scope.clear()
            conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, scope: Optional[TransactionScope] = None):
    shared = scope.connection if scope is not None else None
    if shared is not None:
        with translate_store_errors():
            cur = shared.cursor(dictionary=dictionary)
            try:
                yield shared, cur
            finally:
                cur.close()
        return

    with translate_store_errors():
        conn = conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=dictionary)
            try:
                yield conn, cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def like_pattern(term: str) -> str:
    """Escape LIKE wildcards and wrap ``term`` for a substring match."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped.lower()}%"
