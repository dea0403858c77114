from __future__ import annotations

from flask import Flask, request

from ..common.web import api_errors, login_required, ok, ok_outcome, roles_required
from ..core.constants import INVOICE_CATEGORIES
from ..core.enums import ADMIN_PROFILES
from ..core.exceptions import ValidationError


def register(app: Flask, container) -> None:
    def _with_link(invoice) -> dict:
        out = invoice.to_dict()
        if invoice.file_url:
            out["download_url"] = container.storage.create_signed_url(invoice.file_url)
        return out

    @app.route("/api/invoices", methods=["GET"], endpoint="api_invoices")
    @login_required
    @api_errors
    def list_invoices():
        return ok([_with_link(inv) for inv in container.invoice_service.list_invoices()])

    @app.route("/api/invoices/categories", methods=["GET"], endpoint="api_invoice_categories")
    @login_required
    def categories():
        return ok(list(INVOICE_CATEGORIES))

    @app.route("/api/invoices", methods=["POST"], endpoint="api_invoices_upload")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def upload_invoice():
        file = request.files.get("file")
        if not file or not file.filename:
            raise ValidationError("Kérjük válasszon fájlt")
        outcome = container.invoice_service.process_upload(
            file_name=file.filename,
            data=file.read(),
            mime_type=file.mimetype,
            organization=request.form.get("organization"),
        )
        return ok_outcome(outcome, {"invoice_id": outcome.value}, status=201)

    @app.route("/api/invoices/<int:invoice_id>", methods=["PUT"], endpoint="api_invoices_update")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def update_invoice(invoice_id: int):
        payload = request.get_json(silent=True) or {}
        invoice = container.invoice_service.update_invoice(invoice_id, payload)
        return ok(_with_link(invoice))

    @app.route("/api/invoices/<int:invoice_id>", methods=["DELETE"], endpoint="api_invoices_delete")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def delete_invoice(invoice_id: int):
        return ok_outcome(container.invoice_service.delete_invoice(invoice_id))
