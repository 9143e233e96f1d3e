from __future__ import annotations

import unicodedata
from dataclasses import replace
from typing import Iterable, List, Optional, Union

from .model import EmployeeDto, EmployeeRecord


class EmployeeMapper:
    """Stateless conversion between :class:`EmployeeRecord` and :class:`EmployeeDto`.

    No I/O happens here. Timestamps only ever travel record -> dto, never back,
    because the store owns them.
    """

    def to_dto(self, record: Optional[EmployeeRecord]) -> Optional[EmployeeDto]:
        if record is None:
            return None
        return EmployeeDto(
            employee_id=record.employee_id,
            first_name=record.first_name,
            last_name=record.last_name,
            email=record.email,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_record(self, dto: Optional[EmployeeDto]) -> Optional[EmployeeRecord]:
        if dto is None:
            return None
        return EmployeeRecord(
            employee_id=dto.employee_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
        )

    def to_record_with_id(self, dto: Optional[EmployeeDto], existing_id: Optional[int]) -> Optional[EmployeeRecord]:
        if dto is None:
            return None
        return EmployeeRecord(
            employee_id=existing_id,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
        )

    def update_record_from_dto(
        self, record: Optional[EmployeeRecord], dto: Optional[EmployeeDto]
    ) -> Optional[EmployeeRecord]:
        """Return ``record`` with names and email taken from ``dto``.

        Id and timestamps are kept from ``record``. Records are immutable, so
        the caller gets a new value and must save it explicitly.
        """
        if record is None or dto is None:
            return record
        return replace(record, first_name=dto.first_name, last_name=dto.last_name, email=dto.email)

    def to_dto_list(self, records: Optional[Iterable[EmployeeRecord]]) -> List[EmployeeDto]:
        if not records:
            return []
        return [self.to_dto(r) for r in records]

    def to_record_list(self, dtos: Optional[Iterable[EmployeeDto]]) -> List[EmployeeRecord]:
        if not dtos:
            return []
        return [self.to_record(d) for d in dtos]

    def to_dto_list_with_email(self, records: Optional[Iterable[EmployeeRecord]]) -> List[EmployeeDto]:
        if not records:
            return []
        return [self.to_dto(r) for r in records if r.has_email]

    def to_dto_list_without_email(self, records: Optional[Iterable[EmployeeRecord]]) -> List[EmployeeDto]:
        if not records:
            return []
        return [self.to_dto(r) for r in records if not r.has_email]

    def to_dto_list_sorted_by_name(self, records: Optional[Iterable[EmployeeRecord]]) -> List[EmployeeDto]:
        if not records:
            return []
        return [self.to_dto(r) for r in sorted(records, key=_name_sort_key)]

    def extract_full_names(self, records: Optional[Iterable[EmployeeRecord]]) -> List[str]:
        if not records:
            return []
        return [r.full_name for r in records]

    def extract_initials(self, records: Optional[Iterable[EmployeeRecord]]) -> List[str]:
        if not records:
            return []
        return [r.initials for r in records]

    def count_with_email(self, records: Optional[Iterable[EmployeeRecord]]) -> int:
        if not records:
            return 0
        return sum(1 for r in records if r.has_email)

    @staticmethod
    def is_valid(item: Optional[Union[EmployeeDto, EmployeeRecord]]) -> bool:
        """Minimal structural gate: both name parts present and non-blank."""
        if item is None:
            return False
        first_name, last_name = item.first_name, item.last_name
        return bool(first_name and first_name.strip() and last_name and last_name.strip())


def _fold(value: Optional[str]) -> str:
    decomposed = unicodedata.normalize("NFKD", value or "")
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def _name_sort_key(record: EmployeeRecord):
    # Accent and case insensitive, like ORDER BY first_name, last_name under utf8mb4_unicode_ci.
    return (_fold(record.first_name), _fold(record.last_name))
