from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import ADMIN_PROFILES, ProfileType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..profiles.model import SessionProfile
from .model import AttendanceEntry, DayCount, SchoolClass, SheetRow, SheetSummary, Student
from .repository import AttendanceRepository, ClassRepository

logger = logging.getLogger("feketerigo_admin.attendance")


def can_see(viewer: SessionProfile, cls: SchoolClass) -> bool:
    if viewer.profile_type in ADMIN_PROFILES:
        return True
    if viewer.profile_type == ProfileType.HAZ_VEZETO:
        return bool(viewer.house) and cls.house == viewer.house
    if viewer.profile_type == ProfileType.PEDAGOGUS:
        return cls.pedagogus_id == viewer.user_id
    return False


def summarize_rows(rows: Iterable[SheetRow]) -> SheetSummary:
    present = absent = not_recorded = 0
    for row in rows:
        if not row.recorded:
            not_recorded += 1
        elif row.present:
            present += 1
        else:
            absent += 1
    recorded = present + absent
    rate = round(present / recorded * 100, 1) if recorded else 0.0
    return SheetSummary(present=present, absent=absent, not_recorded=not_recorded, rate=rate)


class AttendanceService:
    """Classes, students and the daily attendance sheet of each class."""

    def __init__(self, classes: ClassRepository, attendance: AttendanceRepository):
        self._classes = classes
        self._attendance = attendance

    # Classes and students.

    def visible_classes(self, viewer: SessionProfile) -> list[SchoolClass]:
        return [c for c in self._classes.list_classes() if can_see(viewer, c)]

    def get_class(self, viewer: SessionProfile, class_id: int) -> SchoolClass:
        cls = self._classes.get_class(class_id)
        if not cls:
            raise NotFoundError("A csoport nem található")
        if not can_see(viewer, cls):
            raise AuthorizationError("Nincs jogosultsága ehhez a csoporthoz")
        return cls

    def list_students(self, viewer: SessionProfile, class_id: int) -> list[Student]:
        self.get_class(viewer, class_id)
        return list(self._classes.list_students(class_id))

    def create_class(
        self,
        viewer: SessionProfile,
        *,
        name: str,
        house: str,
        pedagogus_id: Optional[int],
        student_names: Sequence[str],
    ) -> int:
        self._require_manager(viewer)
        name = require_non_empty(name, "Csoport neve")
        house = require_non_empty(house, "Ház")
        if viewer.profile_type == ProfileType.HAZ_VEZETO and house != viewer.house:
            raise AuthorizationError("Csak a saját házában hozhat létre csoportot")
        names = [n.strip() for n in student_names if n and n.strip()]
        if not names:
            raise ValidationError("Legalább egy gyermek megadása kötelező")

        class_id = self._classes.create_class(name=name, house=house, pedagogus_id=pedagogus_id)
        for student_name in names:
            self._classes.add_student(class_id, student_name)
        logger.info("Class %s created in %s with %d students", name, house, len(names))
        return class_id

    def update_class(
        self,
        viewer: SessionProfile,
        class_id: int,
        *,
        name: str,
        house: str,
        pedagogus_id: Optional[int],
    ) -> None:
        self._require_manager(viewer)
        self.get_class(viewer, class_id)
        self._classes.update_class(
            class_id,
            name=require_non_empty(name, "Csoport neve"),
            house=require_non_empty(house, "Ház"),
            pedagogus_id=pedagogus_id,
        )

    def delete_class(self, viewer: SessionProfile, class_id: int) -> None:
        self._require_manager(viewer)
        self.get_class(viewer, class_id)
        self._classes.delete_class(class_id)
        logger.info("Class #%s deleted", class_id)

    def add_student(self, viewer: SessionProfile, class_id: int, name: str) -> int:
        self.get_class(viewer, class_id)
        return self._classes.add_student(class_id, require_non_empty(name, "Gyermek neve"))

    def delete_student(self, viewer: SessionProfile, student_id: int) -> None:
        student = self._classes.get_student(student_id)
        if not student:
            raise NotFoundError("A gyermek nem található")
        self.get_class(viewer, student.class_id)
        self._classes.delete_student(student_id)
        logger.info("Student #%s deleted with attendance history", student_id)

    # Sheets.

    def entry_sheet(self, viewer: SessionProfile, class_id: int, attendance_date: date) -> list[SheetRow]:
        """Live entry form: a student without a record is shown as present."""

        records = self._records_by_student(viewer, class_id, attendance_date)
        rows = []
        for s in self._classes.list_students(class_id):
            rec = records.get(s.student_id)
            rows.append(
                SheetRow(
                    student_id=s.student_id,
                    student_name=s.name,
                    present=rec.present if rec else True,
                    notes=(rec.notes or "") if rec else "",
                    recorded=rec is not None,
                )
            )
        return rows

    def report_sheet(
        self, viewer: SessionProfile, class_id: int, attendance_date: date
    ) -> tuple[list[SheetRow], SheetSummary]:
        """Historical view: a student without a record is "not recorded"."""

        records = self._records_by_student(viewer, class_id, attendance_date)
        rows = []
        for s in self._classes.list_students(class_id):
            rec = records.get(s.student_id)
            rows.append(
                SheetRow(
                    student_id=s.student_id,
                    student_name=s.name,
                    present=bool(rec and rec.present),
                    notes=(rec.notes or "") if rec else "",
                    recorded=rec is not None,
                )
            )
        return rows, summarize_rows(rows)

    def save_sheet(
        self,
        viewer: SessionProfile,
        class_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
    ) -> int:
        """Replace the whole (class, date) sheet: delete, then insert. Last writer wins."""

        self.get_class(viewer, class_id)
        student_ids = {s.student_id for s in self._classes.list_students(class_id)}
        seen: set[int] = set()
        cleaned = []
        for e in entries:
            if e.student_id not in student_ids:
                raise ValidationError(f"A gyermek (#{e.student_id}) nem ebbe a csoportba tartozik")
            if e.student_id in seen:
                raise ValidationError(f"A gyermek (#{e.student_id}) többször szerepel")
            seen.add(e.student_id)
            notes = (e.notes or "").strip() or None
            cleaned.append(AttendanceEntry(student_id=e.student_id, present=bool(e.present), notes=notes))

        removed = self._attendance.delete_for_class_and_date(class_id, attendance_date)
        inserted = self._attendance.insert_many(
            class_id=class_id,
            attendance_date=attendance_date,
            entries=cleaned,
            pedagogus_id=viewer.user_id,
        )
        logger.info(
            "Attendance for class #%s on %s saved (%d replaced, %d written)",
            class_id,
            attendance_date,
            removed,
            inserted,
        )
        return inserted

    def missing_classes(self, viewer: SessionProfile, attendance_date: date) -> list[SchoolClass]:
        recorded = self._attendance.class_ids_with_records(attendance_date)
        return [
            c
            for c in self.visible_classes(viewer)
            if c.student_count > 0 and c.class_id not in recorded
        ]

    def class_history(self, viewer: SessionProfile, class_id: int, start: date, end: date) -> list[DayCount]:
        self.get_class(viewer, class_id)
        if end < start:
            raise ValidationError("A kezdő dátum nem lehet későbbi a záró dátumnál")
        counts: dict[date, list[int]] = {}
        for rec in self._attendance.list_for_class_between(class_id, start, end):
            bucket = counts.setdefault(rec.attendance_date, [0, 0])
            bucket[0 if rec.present else 1] += 1
        return [DayCount(attendance_date=d, present=p, absent=a) for d, (p, a) in sorted(counts.items())]

    def _records_by_student(self, viewer: SessionProfile, class_id: int, attendance_date: date) -> dict:
        self.get_class(viewer, class_id)
        return {r.student_id: r for r in self._attendance.list_for_class_and_date(class_id, attendance_date)}

    @staticmethod
    def _require_manager(viewer: SessionProfile) -> None:
        if viewer.profile_type not in ADMIN_PROFILES and viewer.profile_type != ProfileType.HAZ_VEZETO:
            raise AuthorizationError("Nincs jogosultsága csoportok kezeléséhez")
