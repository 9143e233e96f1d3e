"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; business rules live in EmployeeService.
"""

import importlib

from config import get_settings_module

from src.employee_management.employee_management.container import build_container
from src.employee_management.employee_management.employees.model import EmployeeDto


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.employee_service

    saved = service.create_or_update(EmployeeDto(first_name=" jOHN ", last_name="smith ", email=" John.Smith@Example.com "))
    print(saved.to_display_string())
    print(service.get_statistics())


if __name__ == "__main__":
    main()
