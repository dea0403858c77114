from __future__ import annotations

from flask import Flask

from ..common.web import api_errors, ok, ok_outcome, roles_required
from ..core.enums import ADMIN_PROFILES


def register(app: Flask, container) -> None:
    @app.route("/api/backups", methods=["GET"], endpoint="api_backups")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def overview():
        return ok(container.backup_service.overview())

    @app.route("/api/backups/manual", methods=["POST"], endpoint="api_backups_manual")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def manual():
        return ok_outcome(container.backup_service.run_manual_backup())

    @app.route("/api/backups/schedule", methods=["POST"], endpoint="api_backups_schedule")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def schedule():
        return ok_outcome(container.backup_service.setup_schedule())
