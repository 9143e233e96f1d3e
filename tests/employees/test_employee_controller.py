from __future__ import annotations

from src.employee_management.employee_management.core.exceptions import ConflictOnWriteError, UnexpectedStoreError
from src.employee_management.employee_management.employees.model import EmployeeRecord


def test_list_page_shows_all_employees(client, seeded_repo):
    resp = client.get("/")

    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "Lokesh Gupta" in body
    assert "Pedro López" in body
    assert "Total: 4" in body


def test_create_redirects_and_flashes_normalized_name(client, employees_repo):
    resp = client.post(
        "/employees/save",
        data={"first_name": " jOHN ", "last_name": "doe ", "email": " JOHN@EXAMPLE.COM "},
        follow_redirects=True,
    )

    assert resp.status_code == 200
    assert "Employee created: John Doe" in resp.get_data(as_text=True)
    assert employees_repo.find_by_id(1).email == "john@example.com"


def test_invalid_form_rerenders_with_field_errors(client, employees_repo):
    resp = client.post("/employees/save", data={"first_name": "J", "last_name": "Doe", "email": "nope"})

    assert resp.status_code == 400
    body = resp.get_data(as_text=True)
    assert "at least 2 characters" in body
    assert "not a valid email address" in body
    assert employees_repo.count() == 0


def test_duplicate_email_rerenders_form(client, seeded_repo):
    resp = client.post(
        "/employees/save",
        data={"employee_id": "2", "first_name": "John", "last_name": "Doe", "email": "howtodoinjava@gmail.com"},
    )

    assert resp.status_code == 400
    assert "already registered" in resp.get_data(as_text=True)
    assert seeded_repo.find_by_id(2).email == "xyz@email.com"


def test_update_with_stale_id_renders_not_found_page(client, seeded_repo):
    resp = client.post("/employees/save", data={"employee_id": "77", "first_name": "Ghost", "last_name": "User"})

    assert resp.status_code == 404
    assert "Employee id: 77" in resp.get_data(as_text=True)


def test_edit_page_for_unknown_employee_is_404(client):
    resp = client.get("/employees/edit/12")

    assert resp.status_code == 404


def test_edit_page_prefills_form(client, seeded_repo):
    resp = client.get("/employees/edit/3")

    assert resp.status_code == 200
    assert 'value="maria.garcia@company.com"' in resp.get_data(as_text=True)


def test_delete_flashes_name(client, seeded_repo):
    resp = client.post("/employees/delete/2", follow_redirects=True)

    assert "Employee deleted: John Doe" in resp.get_data(as_text=True)
    assert seeded_repo.find_by_id(2) is None


def test_delete_unknown_flashes_error_and_keeps_count(client, seeded_repo):
    resp = client.post("/employees/delete/99", follow_redirects=True)

    assert "Employee with id 99 was not found" in resp.get_data(as_text=True)
    assert seeded_repo.count() == 4


def test_search_page(client, seeded_repo):
    resp = client.get("/employees/search", query_string={"term": "company"})

    body = resp.get_data(as_text=True)
    assert "Found 1 employees for &#39;company&#39;" in body
    assert "María García" in body
    assert "Lokesh Gupta" not in body


def test_search_without_term_shows_everyone(client, seeded_repo):
    resp = client.get("/employees/search")

    body = resp.get_data(as_text=True)
    assert "Showing all employees" in body
    assert "Total: 4" in body


def test_stats_page(client, employees_repo):
    employees_repo.insert_raw(EmployeeRecord(None, "Ana", "Gómez", "ana@x.com"))
    employees_repo.insert_raw(EmployeeRecord(None, "Eva", "Ruiz", None))

    resp = client.get("/employees/stats")

    body = resp.get_data(as_text=True)
    assert resp.status_code == 200
    assert "50.0%" in body


def test_store_conflict_rerenders_form_with_409(client, employees_repo, monkeypatch):
    def conflicting_save(record):
        raise ConflictOnWriteError(
            "ana@x.com is already registered, please retry with another value", field="email", value="ana@x.com"
        )

    monkeypatch.setattr(employees_repo, "save", conflicting_save)

    resp = client.post("/employees/save", data={"first_name": "Ana", "last_name": "Gómez", "email": "ana@x.com"})

    assert resp.status_code == 409
    body = resp.get_data(as_text=True)
    assert "please retry with another value" in body
    assert 'value="ana@x.com"' in body
    assert employees_repo.count() == 0


def test_unexpected_store_error_renders_500_page(client, employees_repo, monkeypatch):
    def broken_save(record):
        raise UnexpectedStoreError("Lost connection to MySQL server during query")

    monkeypatch.setattr(employees_repo, "save", broken_save)

    resp = client.post("/employees/save", data={"first_name": "Ana", "last_name": "Gómez"})

    assert resp.status_code == 500
    body = resp.get_data(as_text=True)
    assert "An unexpected error occurred" in body
    assert "Lost connection" not in body
