from __future__ import annotations

from flask import Flask, request

from ..common.web import api_errors, current_user_id, login_required, ok, roles_required
from ..core.enums import ADMIN_PROFILES
from ..core.exceptions import ValidationError


def register(app: Flask, container) -> None:
    @app.route("/api/teams", methods=["GET"], endpoint="api_teams")
    @login_required
    @api_errors
    def list_teams():
        return ok([t.to_dict() for t in container.team_service.list_teams()])

    @app.route("/api/teams", methods=["POST"], endpoint="api_teams_create")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def create_team():
        payload = request.get_json(silent=True) or {}
        try:
            member_ids = [int(m) for m in payload.get("member_ids") or []]
            lead_id = int(payload["lead_id"]) if payload.get("lead_id") is not None else None
        except (TypeError, ValueError):
            raise ValidationError("Érvénytelen tag azonosító")
        team_id = container.team_service.create_team(
            name=payload.get("name", ""),
            description=payload.get("description"),
            member_ids=member_ids,
            lead_id=lead_id,
            created_by=current_user_id(),
        )
        return ok({"team_id": team_id}, status=201)

    @app.route("/api/teams/<int:team_id>", methods=["DELETE"], endpoint="api_teams_delete")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def delete_team(team_id: int):
        container.team_service.delete_team(team_id)
        return ok()
