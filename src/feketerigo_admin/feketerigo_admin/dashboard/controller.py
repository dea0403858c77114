from __future__ import annotations

from flask import Flask, request

from ..common.web import api_errors, login_required, ok
from .model import DashboardFilters


def register(app: Flask, container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="api_dashboard")
    @login_required
    @api_errors
    def dashboard():
        filters = DashboardFilters(
            month=request.args.get("month") or None,
            munkaszam=request.args.get("munkaszam") or None,
            rental=request.args.get("rental") or None,
        )
        return ok(container.dashboard_service.build(filters))
