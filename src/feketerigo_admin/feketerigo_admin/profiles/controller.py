from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.web import api_errors, login_required, ok, roles_required
from ..core.enums import ADMIN_PROFILES, ProfileType
from ..core.exceptions import ValidationError


def register(app: Flask, container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    @api_errors
    def login():
        payload = request.get_json(silent=True) or request.form
        email = payload.get("email", "")
        password = payload.get("password", "")

        s_profile = container.auth_service.authenticate(email, password)

        session.clear()
        session.permanent = bool(payload.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_profile.user_id
        session["name"] = s_profile.name
        session["role"] = s_profile.profile_type.value
        session["house"] = s_profile.house

        return ok(
            {
                "user_id": s_profile.user_id,
                "name": s_profile.name,
                "role": s_profile.profile_type.value,
                "house": s_profile.house,
            }
        )

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    def me():
        return ok(
            {
                "user_id": session.get("user_id"),
                "name": session.get("name"),
                "role": session.get("role"),
                "house": session.get("house"),
            }
        )

    @app.route("/api/profiles", methods=["GET"], endpoint="api_profiles")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def profiles():
        type_s = request.args.get("type")
        profile_type = None
        if type_s:
            try:
                profile_type = ProfileType(type_s)
            except ValueError:
                raise ValidationError("Ismeretlen profiltípus")
        rows = container.profile_service.list_directory(search=request.args.get("q"), profile_type=profile_type)
        return ok([p.to_public_dict() for p in rows])

    @app.route("/api/profiles", methods=["POST"], endpoint="api_profiles_create")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def create_profile():
        payload = request.get_json(silent=True) or {}
        try:
            profile_type = ProfileType(payload.get("profile_type", ProfileType.PEDAGOGUS.value))
        except ValueError:
            raise ValidationError("Ismeretlen profiltípus")
        user_id = container.profile_service.create_account(
            name=payload.get("name", ""),
            email=payload.get("email", ""),
            password=payload.get("password", ""),
            profile_type=profile_type,
            house=payload.get("house"),
        )
        return ok({"user_id": user_id}, status=201)
