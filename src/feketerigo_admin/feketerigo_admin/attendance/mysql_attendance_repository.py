from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEntry, AttendanceRecord, SchoolClass, Student
from .repository import AttendanceRepository, ClassRepository


def _row_to_class(row: dict) -> SchoolClass:
    return SchoolClass(
        class_id=int(row["class_id"]),
        name=row["name"],
        house=row["house"],
        pedagogus_id=row.get("pedagogus_id"),
        pedagogus_name=row.get("pedagogus_name"),
        student_count=int(row.get("student_count") or 0),
    )


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(row["record_id"]),
        student_id=int(row["student_id"]),
        class_id=int(row["class_id"]),
        attendance_date=row["attendance_date"],
        present=bool(row["present"]),
        notes=row.get("notes"),
        pedagogus_id=row.get("pedagogus_id"),
    )


_CLASS_SELECT = """
    SELECT c.class_id, c.name, c.house, c.pedagogus_id, p.name AS pedagogus_name,
           (SELECT COUNT(*) FROM students s WHERE s.class_id = c.class_id) AS student_count
    FROM classes c
    LEFT JOIN profiles p ON p.user_id = c.pedagogus_id
"""


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_classes(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CLASS_SELECT + " ORDER BY c.house, c.name")
            return [_row_to_class(r) for r in fetchall(cur)]

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_CLASS_SELECT + " WHERE c.class_id=%s", (class_id,))
            row = fetchone(cur)
            return _row_to_class(row) if row else None

    def create_class(self, *, name: str, house: str, pedagogus_id: Optional[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO classes(name, house, pedagogus_id) VALUES(%s,%s,%s)",
                (name, house, pedagogus_id),
            )
            return int(cur.lastrowid)

    def update_class(self, class_id: int, *, name: str, house: str, pedagogus_id: Optional[int]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE classes SET name=%s, house=%s, pedagogus_id=%s WHERE class_id=%s",
                (name, house, pedagogus_id, class_id),
            )
            return cur.rowcount > 0

    def delete_class(self, class_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE class_id=%s", (class_id,))
            return cur.rowcount > 0

    def list_students(self, class_id: int) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, class_id, name FROM students WHERE class_id=%s ORDER BY name",
                (class_id,),
            )
            return [
                Student(student_id=int(r["student_id"]), class_id=int(r["class_id"]), name=r["name"])
                for r in fetchall(cur)
            ]

    def get_student(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id, class_id, name FROM students WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            if not row:
                return None
            return Student(student_id=int(row["student_id"]), class_id=int(row["class_id"]), name=row["name"])

    def add_student(self, class_id: int, name: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO students(class_id, name) VALUES(%s,%s)", (class_id, name))
            return int(cur.lastrowid)

    def delete_student(self, student_id: int) -> bool:
        # attendance_records rows go via ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (student_id,))
            return cur.rowcount > 0


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_class_and_date(self, class_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, student_id, class_id, pedagogus_id, attendance_date, present, notes
                FROM attendance_records
                WHERE class_id=%s AND attendance_date=%s
                """,
                (class_id, attendance_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_for_class_between(self, class_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, student_id, class_id, pedagogus_id, attendance_date, present, notes
                FROM attendance_records
                WHERE class_id=%s AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date
                """,
                (class_id, start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def class_ids_with_records(self, attendance_date: date) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT class_id FROM attendance_records WHERE attendance_date=%s",
                (attendance_date,),
            )
            return {int(r["class_id"]) for r in fetchall(cur)}

    def delete_for_class_and_date(self, class_id: int, attendance_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE class_id=%s AND attendance_date=%s",
                (class_id, attendance_date),
            )
            return int(cur.rowcount)

    def insert_many(
        self,
        *,
        class_id: int,
        attendance_date: date,
        entries: Sequence[AttendanceEntry],
        pedagogus_id: Optional[int],
    ) -> int:
        rows = [
            (e.student_id, class_id, pedagogus_id, attendance_date, 1 if e.present else 0, e.notes)
            for e in entries
        ]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance_records(student_id, class_id, pedagogus_id, attendance_date, present, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                rows,
            )
            return len(rows)
