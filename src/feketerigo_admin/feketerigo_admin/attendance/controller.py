from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import api_errors, login_required, ok
from ..core.enums import ProfileType
from ..core.exceptions import ValidationError
from ..profiles.model import SessionProfile
from .model import AttendanceEntry


def register(app: Flask, container) -> None:
    def _viewer() -> SessionProfile:
        return SessionProfile(
            user_id=int(session["user_id"]),
            name=session.get("name") or "",
            profile_type=ProfileType(session.get("role")),
            house=session.get("house"),
        )

    def _parse_date(value: str | None) -> date:
        if not value:
            return now_local().date()
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("Érvénytelen dátum (ÉÉÉÉ-HH-NN)")

    def _write_sheet_csv(*, rows, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=["student_id", "student_name", "status", "notes"])
        writer.writeheader()
        for row in rows:
            if not row.recorded:
                status = "nincs rögzítve"
            else:
                status = "jelen" if row.present else "hiányzik"
            writer.writerow(
                {"student_id": row.student_id, "student_name": row.student_name, "status": status, "notes": row.notes}
            )

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/classes", methods=["GET"], endpoint="api_attendance_classes")
    @login_required
    @api_errors
    def classes():
        return ok([c.to_dict() for c in container.attendance_service.visible_classes(_viewer())])

    @app.route("/api/attendance/classes", methods=["POST"], endpoint="api_attendance_class_create")
    @login_required
    @api_errors
    def create_class():
        payload = request.get_json(silent=True) or {}
        class_id = container.attendance_service.create_class(
            _viewer(),
            name=payload.get("name", ""),
            house=payload.get("house", ""),
            pedagogus_id=payload.get("pedagogus_id"),
            student_names=payload.get("students") or [],
        )
        return ok({"class_id": class_id}, status=201)

    @app.route("/api/attendance/classes/<int:class_id>", methods=["PUT"], endpoint="api_attendance_class_update")
    @login_required
    @api_errors
    def update_class(class_id: int):
        payload = request.get_json(silent=True) or {}
        container.attendance_service.update_class(
            _viewer(),
            class_id,
            name=payload.get("name", ""),
            house=payload.get("house", ""),
            pedagogus_id=payload.get("pedagogus_id"),
        )
        return ok()

    @app.route("/api/attendance/classes/<int:class_id>", methods=["DELETE"], endpoint="api_attendance_class_delete")
    @login_required
    @api_errors
    def delete_class(class_id: int):
        container.attendance_service.delete_class(_viewer(), class_id)
        return ok()

    @app.route("/api/attendance/classes/<int:class_id>/students", methods=["GET"], endpoint="api_attendance_students")
    @login_required
    @api_errors
    def students(class_id: int):
        rows = container.attendance_service.list_students(_viewer(), class_id)
        return ok([{"student_id": s.student_id, "name": s.name} for s in rows])

    @app.route("/api/attendance/classes/<int:class_id>/students", methods=["POST"], endpoint="api_attendance_student_add")
    @login_required
    @api_errors
    def add_student(class_id: int):
        payload = request.get_json(silent=True) or {}
        student_id = container.attendance_service.add_student(_viewer(), class_id, payload.get("name", ""))
        return ok({"student_id": student_id}, status=201)

    @app.route("/api/attendance/students/<int:student_id>", methods=["DELETE"], endpoint="api_attendance_student_delete")
    @login_required
    @api_errors
    def delete_student(student_id: int):
        container.attendance_service.delete_student(_viewer(), student_id)
        return ok()

    @app.route("/api/attendance/classes/<int:class_id>/sheet", methods=["GET"], endpoint="api_attendance_sheet")
    @login_required
    @api_errors
    def sheet(class_id: int):
        day = _parse_date(request.args.get("date"))
        rows = container.attendance_service.entry_sheet(_viewer(), class_id, day)
        return ok({"date": day.isoformat(), "rows": [r.to_dict() for r in rows]})

    @app.route("/api/attendance/classes/<int:class_id>/sheet", methods=["PUT"], endpoint="api_attendance_sheet_save")
    @login_required
    @api_errors
    def save_sheet(class_id: int):
        payload = request.get_json(silent=True) or {}
        day = _parse_date(payload.get("date"))
        try:
            entries = [
                AttendanceEntry(
                    student_id=int(e["student_id"]),
                    present=bool(e.get("present", True)),
                    notes=e.get("notes"),
                )
                for e in payload.get("entries") or []
            ]
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Érvénytelen jelenléti adatok")
        saved = container.attendance_service.save_sheet(_viewer(), class_id, day, entries)
        return ok({"saved": saved})

    @app.route("/api/attendance/classes/<int:class_id>/report", methods=["GET"], endpoint="api_attendance_report")
    @login_required
    @api_errors
    def report(class_id: int):
        day = _parse_date(request.args.get("date"))
        rows, summary = container.attendance_service.report_sheet(_viewer(), class_id, day)
        return ok({"date": day.isoformat(), "rows": [r.to_dict() for r in rows], "summary": summary.to_dict()})

    @app.route("/api/attendance/classes/<int:class_id>/report.csv", methods=["GET"], endpoint="api_attendance_report_csv")
    @login_required
    @api_errors
    def report_csv(class_id: int):
        day = _parse_date(request.args.get("date"))
        rows, _ = container.attendance_service.report_sheet(_viewer(), class_id, day)
        return _write_sheet_csv(rows=rows, filename=f"jelenlet_{class_id}_{day.strftime('%Y%m%d')}.csv")

    @app.route("/api/attendance/classes/<int:class_id>/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    @api_errors
    def history(class_id: int):
        end = _parse_date(request.args.get("end"))
        start = _parse_date(request.args.get("start") or end.replace(day=1).isoformat())
        days = container.attendance_service.class_history(_viewer(), class_id, start, end)
        return ok([d.to_dict() for d in days])

    @app.route("/api/attendance/missing", methods=["GET"], endpoint="api_attendance_missing")
    @login_required
    @api_errors
    def missing():
        day = _parse_date(request.args.get("date"))
        rows = container.attendance_service.missing_classes(_viewer(), day)
        return ok({"date": day.isoformat(), "classes": [c.to_dict() for c in rows]})
