from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceRecord, SchoolClass, Student


class ClassRepository(Protocol):
    def list_classes(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create_class(self, *, name: str, house: str, pedagogus_id: Optional[int]) -> int:
        raise NotImplementedError

    def update_class(self, class_id: int, *, name: str, house: str, pedagogus_id: Optional[int]) -> bool:
        raise NotImplementedError

    def delete_class(self, class_id: int) -> bool:
        raise NotImplementedError

    def list_students(self, class_id: int) -> Sequence[Student]:
        raise NotImplementedError

    def get_student(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def add_student(self, class_id: int, name: str) -> int:
        raise NotImplementedError

    def delete_student(self, student_id: int) -> bool:
        """Attendance history of the student goes with it."""
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_class_between(self, class_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def class_ids_with_records(self, attendance_date: date) -> set[int]:
        raise NotImplementedError

    def delete_for_class_and_date(self, class_id: int, attendance_date: date) -> int:
        raise NotImplementedError

    def insert_many(
        self,
        *,
        class_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        pedagogus_id: Optional[int],
    ) -> int:
        raise NotImplementedError
