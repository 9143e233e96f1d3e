from __future__ import annotations

from pathlib import Path

from src.employee_management.employee_management.database.bootstrap import _prepare_script, iter_sql_statements

REPO_ROOT = Path(__file__).resolve().parents[2]


def test_splitter_ignores_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES (\"c;d\");SELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        'INSERT INTO t VALUES ("c;d")',
        "SELECT 1",
    ]


def test_splitter_handles_escaped_quotes():
    sql = "INSERT INTO t VALUES ('O\\'Brien; Jr'); SELECT 2;"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('O\\'Brien; Jr')", "SELECT 2"]


def test_prepare_script_drops_database_statements_and_comments():
    sql = "-- header\nCREATE DATABASE IF NOT EXISTS x;\nUSE x;\nCREATE TABLE a (id INT);\n"

    assert list(iter_sql_statements(_prepare_script(sql))) == ["CREATE TABLE a (id INT)"]


def test_shipped_scripts_split_into_expected_statements():
    schema = (REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8")
    seed = (REPO_ROOT / "database" / "seed.sql").read_text(encoding="utf-8")

    schema_stmts = list(iter_sql_statements(_prepare_script(schema)))
    seed_stmts = list(iter_sql_statements(_prepare_script(seed)))

    assert len(schema_stmts) == 1
    assert schema_stmts[0].startswith("CREATE TABLE IF NOT EXISTS employees")
    assert len(seed_stmts) == 6
