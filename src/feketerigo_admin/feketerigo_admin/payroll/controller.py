from __future__ import annotations

import io
import json

from flask import Flask, request, send_file

from ..common.datetime_utils import parse_month
from ..common.web import api_errors, current_user_id, login_required, ok, ok_outcome, roles_required
from ..core.enums import ADMIN_PROFILES
from ..core.exceptions import ValidationError
from .model import UploadedDocument
from .service import lines_from_payload


def register(app: Flask, container) -> None:
    def _document(field: str) -> UploadedDocument:
        file = request.files.get(field)
        if not file or not file.filename:
            raise ValidationError("Kérjük válasszon fájlt")
        return UploadedDocument(file_name=file.filename, data=file.read(), mime_type=file.mimetype or "application/pdf")

    def _month_arg() -> tuple[int, int]:
        value = request.args.get("month") or ""
        try:
            return parse_month(value)
        except ValueError:
            raise ValidationError("Érvénytelen hónap (ÉÉÉÉ-HH)")

    @app.route("/api/payroll/summaries", methods=["GET"], endpoint="api_payroll_summaries")
    @login_required
    @api_errors
    def summaries():
        year = request.args.get("year", type=int)
        rows = container.payroll_service.list_summaries(organization=request.args.get("organization"), year=year)
        return ok([s.to_dict() for s in rows])

    @app.route("/api/payroll/records", methods=["GET"], endpoint="api_payroll_records")
    @login_required
    @api_errors
    def records():
        year, month = _month_arg()
        details = container.payroll_service.record_details(
            organization=request.args.get("organization"), year=year, month=month
        )
        return ok(details)

    @app.route("/api/payroll/export.xlsx", methods=["GET"], endpoint="api_payroll_export")
    @login_required
    @api_errors
    def export():
        year, month = _month_arg()
        organization = request.args.get("organization")
        content = container.payroll_service.export_month(organization=organization, year=year, month=month)
        return send_file(
            io.BytesIO(content),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"berkoltseg_{organization}_{year:04d}_{month:02d}.xlsx",
        )

    @app.route("/api/payroll/extract/payroll", methods=["POST"], endpoint="api_payroll_extract")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def extract_payroll():
        lines = container.payroll_service.extract_payroll(_document("file"), request.form.get("organization"))
        return ok([line.to_dict() for line in lines])

    @app.route("/api/payroll/extract/cash", methods=["POST"], endpoint="api_payroll_extract_cash")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def extract_cash():
        lines = container.payroll_service.extract_cash(_document("file"), request.form.get("organization"))
        return ok([line.to_dict() for line in lines])

    @app.route("/api/payroll/extract/tax", methods=["POST"], endpoint="api_payroll_extract_tax")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def extract_tax():
        amount = container.payroll_service.extract_tax(_document("file"), request.form.get("organization"))
        return ok({"total_tax_amount": amount})

    @app.route("/api/payroll", methods=["POST"], endpoint="api_payroll_save")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def save():
        # multipart: JSON lines in "lines", optional documents in payroll/cash/tax
        try:
            raw_lines = json.loads(request.form.get("lines") or "[]")
        except ValueError:
            raise ValidationError("Érvénytelen bérsor adatok")
        documents = {}
        for slot in ("payroll", "cash", "tax"):
            file = request.files.get(slot)
            if file and file.filename:
                documents[slot] = UploadedDocument(file.filename, file.read(), file.mimetype or "application/pdf")

        outcome = container.payroll_service.save_payroll(
            organization=request.form.get("organization"),
            lines=lines_from_payload(raw_lines),
            tax_amount=request.form.get("tax_amount") or 0,
            documents=documents,
            uploaded_by=current_user_id(),
        )
        return ok_outcome(outcome, [s.to_dict() for s in outcome.value], status=201)

    @app.route("/api/payroll/records/<int:record_id>", methods=["PUT"], endpoint="api_payroll_record_update")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def update_record(record_id: int):
        summary = container.payroll_service.update_record(record_id, request.get_json(silent=True) or {})
        return ok(summary.to_dict())

    @app.route("/api/payroll/records/<int:record_id>", methods=["DELETE"], endpoint="api_payroll_record_delete")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def delete_record(record_id: int):
        summary = container.payroll_service.delete_record(record_id)
        return ok(summary.to_dict())

    @app.route("/api/payroll/month", methods=["DELETE"], endpoint="api_payroll_month_delete")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def delete_month():
        year, month = _month_arg()
        removed = container.payroll_service.delete_month(
            organization=request.args.get("organization"), year=year, month=month
        )
        return ok({"deleted_records": removed})
