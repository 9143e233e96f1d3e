from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, flash, redirect, render_template, request, url_for

from ..core.exceptions import ConflictOnWriteError, EmployeeNotFoundError, InvalidArgumentError, UnexpectedStoreError
from ..container import Container
from .model import EmployeeDto

logger = logging.getLogger(__name__)


def _parse_id(value: Optional[str]) -> Optional[int]:
    v = (value or "").strip()
    if not v:
        return None
    if not v.isdigit():
        raise InvalidArgumentError("Employee id is not valid", field="employee_id", value=v)
    return int(v)


def _dto_from_form(form) -> EmployeeDto:
    return EmployeeDto(
        employee_id=_parse_id(form.get("employee_id")),
        first_name=form.get("first_name", ""),
        last_name=form.get("last_name", ""),
        email=form.get("email") or None,
    )


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    def _render_form(employee: EmployeeDto, *, errors: Optional[dict] = None, error_message: Optional[str] = None, status: int = 200):
        title = "Add employee" if employee.is_new else "Edit employee"
        return (
            render_template(
                "add-edit-employee.html",
                employee=employee,
                is_edit=not employee.is_new,
                page_title=title,
                errors=errors or {},
                error_message=error_message,
            ),
            status,
        )

    @app.route("/", endpoint="list_employees")
    def list_employees():
        employees = service.list_all()
        logger.debug("Rendering %d employees", len(employees))
        return render_template(
            "list-employees.html",
            employees=employees,
            total_employees=len(employees),
            page_title="Employees",
        )

    @app.route("/employees/add", endpoint="add_employee")
    def add_employee():
        return _render_form(EmployeeDto())

    @app.route("/employees/edit/<int:employee_id>", endpoint="edit_employee")
    def edit_employee(employee_id: int):
        employee = service.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return _render_form(employee)

    @app.route("/employees/save", methods=["POST"], endpoint="save_employee")
    def save_employee():
        try:
            employee = _dto_from_form(request.form)
        except InvalidArgumentError as e:
            flash(str(e), "danger")
            return redirect(url_for("list_employees"))

        try:
            saved = service.create_or_update(employee)
        except InvalidArgumentError as e:
            logger.warning("Rejected employee form: %s", e)
            return _render_form(employee, errors=e.errors, error_message=str(e), status=400)
        except ConflictOnWriteError as e:
            logger.warning("Write conflict while saving employee: %s", e)
            return _render_form(employee, error_message=str(e), status=409)

        if employee.is_new:
            flash(f"Employee created: {saved.full_name}", "success")
        else:
            flash(f"Employee updated: {saved.full_name}", "success")
        return redirect(url_for("list_employees"))

    @app.route("/employees/delete/<int:employee_id>", methods=["POST"], endpoint="delete_employee")
    def delete_employee(employee_id: int):
        try:
            existing = service.get_by_id(employee_id)
            service.delete_by_id(employee_id)
            name = existing.full_name if existing else ""
            flash(f"Employee deleted: {name}" if name else "Employee deleted", "success")
        except (InvalidArgumentError, EmployeeNotFoundError) as e:
            logger.warning("Delete failed: %s", e)
            flash(str(e), "danger")

        return redirect(url_for("list_employees"))

    @app.route("/employees/search", endpoint="search_employees")
    def search_employees():
        term = request.args.get("term")
        employees = service.search(term)
        if term and term.strip():
            search_info = f"Found {len(employees)} employees for '{term.strip()}'"
        else:
            search_info = "Showing all employees"

        return render_template(
            "list-employees.html",
            employees=employees,
            total_employees=len(employees),
            search_term=term or "",
            search_info=search_info,
            page_title="Employee search",
        )

    @app.route("/employees/stats", endpoint="employee_stats")
    def employee_stats():
        stats = service.get_statistics()
        return render_template("statistics.html", stats=stats, page_title="Statistics")

    @app.errorhandler(EmployeeNotFoundError)
    def handle_not_found(e: EmployeeNotFoundError):
        logger.error("Employee not found: %s", e)
        details = f"Employee id: {e.employee_id}" if e.has_employee_id else "No employee id given"
        return (
            render_template("error.html", error_title="Employee not found", error_message=str(e), error_details=details, status_code=404),
            404,
        )

    @app.errorhandler(InvalidArgumentError)
    def handle_invalid_argument(e: InvalidArgumentError):
        logger.error("Invalid argument: %s", e)
        return (
            render_template("error.html", error_title="Invalid request", error_message=str(e), error_details=None, status_code=400),
            400,
        )

    @app.errorhandler(ConflictOnWriteError)
    def handle_conflict(e: ConflictOnWriteError):
        logger.error("Data integrity conflict: %s", e)
        return (
            render_template(
                "error.html",
                error_title="Data conflict",
                error_message=str(e),
                error_details="Another request saved the same data first. Please try again.",
                status_code=409,
            ),
            409,
        )

    @app.errorhandler(UnexpectedStoreError)
    def handle_store_error(e: UnexpectedStoreError):
        logger.exception("Unexpected store error")
        details = str(e) if bool(app.config.get("DEBUG", False)) else None
        return (
            render_template(
                "error.html",
                error_title="Unexpected error",
                error_message="An unexpected error occurred. Please try again.",
                error_details=details,
                status_code=500,
            ),
            500,
        )
