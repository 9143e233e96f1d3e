from __future__ import annotations

import logging
from dataclasses import dataclass

from .database.connection import DBConfig, DatabaseConnection
from .employees.mapper import EmployeeMapper
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    employee_mapper: EmployeeMapper
    employee_service: EmployeeService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection.get_instance(config)
    logger.debug("Wiring services against %s", config.describe())

    return build_container_for(MySQLEmployeeRepository(conn))


def build_container_for(employees_repo: EmployeeRepository) -> Container:
    """Wire services around any repository (MySQL in the app, fakes in tests)."""
    mapper = EmployeeMapper()
    return Container(
        employees_repo=employees_repo,
        employee_mapper=mapper,
        employee_service=EmployeeService(employees_repo, mapper),
    )
