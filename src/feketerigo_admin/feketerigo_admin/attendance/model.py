from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    class_id: int
    name: str
    house: str
    pedagogus_id: Optional[int] = None
    pedagogus_name: Optional[str] = None
    student_count: int = 0

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "name": self.name,
            "house": self.house,
            "pedagogus_id": self.pedagogus_id,
            "pedagogus_name": self.pedagogus_name,
            "student_count": self.student_count,
        }


@dataclass(frozen=True)
class Student:
    student_id: int
    class_id: int
    name: str


@dataclass(frozen=True)
class AttendanceRecord:
    record_id: int
    student_id: int
    class_id: int
    attendance_date: date
    present: bool
    notes: Optional[str] = None
    pedagogus_id: Optional[int] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """One row of a sheet submitted for saving."""

    student_id: int
    present: bool
    notes: Optional[str] = None


@dataclass(frozen=True)
class SheetRow:
    student_id: int
    student_name: str
    present: bool
    notes: str
    recorded: bool

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "present": self.present,
            "notes": self.notes,
            "recorded": self.recorded,
        }


@dataclass(frozen=True)
class SheetSummary:
    present: int
    absent: int
    not_recorded: int
    rate: float

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "not_recorded": self.not_recorded,
            "rate": self.rate,
        }


@dataclass(frozen=True)
class DayCount:
    attendance_date: date
    present: int
    absent: int

    def to_dict(self) -> dict:
        return {"date": self.attendance_date.isoformat(), "present": self.present, "absent": self.absent}
