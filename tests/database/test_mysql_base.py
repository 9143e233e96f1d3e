from __future__ import annotations

import mysql.connector
import pytest

from src.employee_management.employee_management.core.exceptions import ConflictOnWriteError, UnexpectedStoreError
from src.employee_management.employee_management.database.connection import DBConfig
from src.employee_management.employee_management.database.mysql_base import like_pattern, translate_store_errors


def test_duplicate_entry_is_a_conflict():
    err = mysql.connector.errors.IntegrityError(msg="Duplicate entry 'x@y.com' for key 'uq_employees_email'", errno=1062)

    with pytest.raises(ConflictOnWriteError) as exc:
        with translate_store_errors():
            raise err

    assert exc.value.field == "email"
    assert exc.value.value == "x@y.com"
    assert exc.value.__cause__ is err


def test_other_integrity_errors_are_unexpected():
    with pytest.raises(UnexpectedStoreError):
        with translate_store_errors():
            raise mysql.connector.errors.IntegrityError(msg="Column 'first_name' cannot be null", errno=1048)


def test_driver_errors_are_unexpected():
    with pytest.raises(UnexpectedStoreError):
        with translate_store_errors():
            raise mysql.connector.errors.InterfaceError(msg="Can't connect")


def test_domain_errors_pass_through():
    with pytest.raises(ConflictOnWriteError):
        with translate_store_errors():
            raise ConflictOnWriteError("taken")


def test_like_pattern():
    assert like_pattern("Ana") == "%ana%"
    assert like_pattern("a_b") == "%a\\_b%"


def test_db_config_from_dict_and_describe():
    config = DBConfig.from_dict({"host": "db", "port": "3307", "user": "app", "password": "secret", "database": "hr"})

    assert config.port == 3307
    assert config.describe() == "app@db:3307/hr"
    assert "secret" not in config.describe()
