from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..common.validators import check_email_syntax, check_length, is_blank, require_non_empty, require_positive_id
from ..core.constants import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, NAME_MIN_LENGTH
from ..core.exceptions import EmployeeNotFoundError, InvalidArgumentError
from .mapper import EmployeeMapper
from .model import EmployeeDto, EmployeeRecord, EmployeeStatistics, ExistingEmployee
from .normalizer import normalize_email, normalize_record
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use cases: manage employee records.

    Callers only ever see :class:`EmployeeDto` values or primitives; records
    stay behind this class.
    """

    def __init__(self, employees: EmployeeRepository, mapper: EmployeeMapper):
        self._employees = employees
        self._mapper = mapper

    # ---- reads -------------------------------------------------------------

    def list_all(self) -> List[EmployeeDto]:
        logger.debug("Listing all employees")
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto_list(self._employees.find_all())

    def get_by_id(self, employee_id: Optional[int]) -> Optional[EmployeeDto]:
        employee_id = require_positive_id(employee_id, "Employee id")
        logger.debug("Looking up employee id=%s", employee_id)
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto(self._employees.find_by_id(employee_id))

    def get_by_email(self, email: Optional[str]) -> Optional[EmployeeDto]:
        require_non_empty(email, "Email")
        logger.debug("Looking up employee by email=%s", email)
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto(self._employees.find_by_email(normalize_email(email)))

    def exists_by_id(self, employee_id: Optional[int]) -> bool:
        employee_id = require_positive_id(employee_id, "Employee id")
        with self._employees.transaction(read_only=True):
            return self._employees.exists_by_id(employee_id)

    def search(self, term: Optional[str]) -> List[EmployeeDto]:
        logger.debug("Searching employees with term=%r", term)
        if is_blank(term):
            return self.list_all()
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto_list(self._employees.search(term.strip()))

    def list_by_first_name(self, fragment: Optional[str]) -> List[EmployeeDto]:
        if is_blank(fragment):
            return self.list_all()
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto_list(self._employees.search_by_first_name(fragment.strip()))

    def list_by_last_name(self, fragment: Optional[str]) -> List[EmployeeDto]:
        if is_blank(fragment):
            return self.list_all()
        with self._employees.transaction(read_only=True):
            return self._mapper.to_dto_list(self._employees.search_by_last_name(fragment.strip()))

    def email_exists(self, email: Optional[str]) -> bool:
        if is_blank(email):
            return False
        with self._employees.transaction(read_only=True):
            return self._employees.exists_by_email(normalize_email(email))

    def email_exists_for_other(self, email: Optional[str], exclude_id: Optional[int]) -> bool:
        if is_blank(email) or exclude_id is None:
            return False
        with self._employees.transaction(read_only=True):
            return self._employees.exists_by_email_excluding_id(normalize_email(email), int(exclude_id))

    def is_valid_employee(self, dto: Optional[EmployeeDto]) -> bool:
        return self._mapper.is_valid(dto)

    # ---- aggregates --------------------------------------------------------

    def _all_records(self) -> List[EmployeeRecord]:
        with self._employees.transaction(read_only=True):
            return list(self._employees.find_all())

    def count_all(self) -> int:
        with self._employees.transaction(read_only=True):
            return self._employees.count()

    def count_with_email(self) -> int:
        return self._mapper.count_with_email(self._all_records())

    def list_with_email(self) -> List[EmployeeDto]:
        return self._mapper.to_dto_list_with_email(self._all_records())

    def list_without_email(self) -> List[EmployeeDto]:
        return self._mapper.to_dto_list_without_email(self._all_records())

    def list_sorted_by_full_name(self) -> List[EmployeeDto]:
        return self._mapper.to_dto_list_sorted_by_name(self._all_records())

    def all_initials(self) -> List[str]:
        return self._mapper.extract_initials(self._all_records())

    def all_full_names(self) -> List[str]:
        return self._mapper.extract_full_names(self._all_records())

    def get_statistics(self) -> EmployeeStatistics:
        records = self._all_records()
        total = len(records)
        with_email = self._mapper.count_with_email(records)
        percentage = (with_email * 100.0 / total) if total > 0 else 0.0
        return EmployeeStatistics(
            total=total,
            with_email=with_email,
            without_email=total - with_email,
            percentage_with_email=percentage,
        )

    # ---- writes ------------------------------------------------------------

    def create_or_update(self, dto: Optional[EmployeeDto]) -> EmployeeDto:
        """Create a new employee (no id) or overwrite an existing one (id).

        Order: validate -> uniqueness check -> load or create -> normalize -> persist.
        """
        logger.debug("Saving employee: %s", dto)
        self._validate_dto(dto)

        identity = dto.identity
        with self._employees.transaction():
            self._validate_email_uniqueness(dto)

            if isinstance(identity, ExistingEmployee):
                existing = self._employees.find_by_id(identity.employee_id)
                if existing is None:
                    raise EmployeeNotFoundError(identity.employee_id)
                record = self._mapper.update_record_from_dto(existing, dto)
            else:
                record = self._mapper.to_record(dto)

            saved = self._employees.save(normalize_record(record))

        saved_dto = self._mapper.to_dto(saved)
        logger.info("Employee saved: id=%s name=%s", saved_dto.employee_id, saved_dto.full_name)
        return saved_dto

    def delete_by_id(self, employee_id: Optional[int]) -> None:
        employee_id = require_positive_id(employee_id, "Employee id")
        logger.debug("Deleting employee id=%s", employee_id)
        with self._employees.transaction():
            existing = self._employees.find_by_id(employee_id)
            if existing is None:
                raise EmployeeNotFoundError(employee_id)
            self._employees.delete_by_id(employee_id)
        logger.info("Employee deleted: id=%s name=%s", employee_id, existing.full_name)

    # ---- rules -------------------------------------------------------------

    def _validate_dto(self, dto: Optional[EmployeeDto]) -> None:
        if dto is None:
            raise InvalidArgumentError("Employee must not be null")
        if not self._mapper.is_valid(dto):
            field = "first_name" if is_blank(dto.first_name) else "last_name"
            raise InvalidArgumentError(
                "Employee must have a valid first name and last name",
                field=field,
                value=getattr(dto, field),
                errors=field_errors(dto),
            )
        if dto.employee_id is not None:
            require_positive_id(dto.employee_id, "Employee id")

        errors = field_errors(dto)
        if errors:
            field, message = next(iter(errors.items()))
            raise InvalidArgumentError(message, field=field, value=getattr(dto, field), errors=errors)

    def _validate_email_uniqueness(self, dto: EmployeeDto) -> None:
        email = normalize_email(dto.email)
        if email is None:
            return

        if dto.is_new:
            taken = self._employees.exists_by_email(email)
        else:
            taken = self._employees.exists_by_email_excluding_id(email, int(dto.employee_id))

        if taken:
            raise InvalidArgumentError(f"The email {email} is already registered", field="email", value=email)


def field_errors(dto: EmployeeDto) -> Dict[str, str]:
    """Field-level form rules; returns ``{field: message}`` for every violation."""
    errors: Dict[str, str] = {}

    for field, label in (("first_name", "First name"), ("last_name", "Last name")):
        value = (getattr(dto, field) or "").strip()
        if not value:
            errors[field] = f"{label} is required"
            continue
        message = check_length(value, label, min_len=NAME_MIN_LENGTH, max_len=NAME_MAX_LENGTH)
        if message:
            errors[field] = message

    email = (dto.email or "").strip()
    if email:
        message = check_length(email, "Email", max_len=EMAIL_MAX_LENGTH) or check_email_syntax(email)
        if message:
            errors["email"] = message

    return errors
