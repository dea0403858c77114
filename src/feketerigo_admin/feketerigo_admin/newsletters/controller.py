from __future__ import annotations

from flask import Flask, request

from ..common.web import api_errors, current_user_id, login_required, ok, ok_outcome, roles_required
from ..core.enums import ADMIN_PROFILES
from ..core.exceptions import ValidationError
from . import builder
from .model import NewsletterComponent


def register(app: Flask, container) -> None:
    def _components(payload: dict) -> list[NewsletterComponent]:
        try:
            return [NewsletterComponent.from_dict(c) for c in payload.get("components") or []]
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Érvénytelen hírlevél elemek")

    @app.route("/api/newsletters", methods=["GET"], endpoint="api_newsletters")
    @login_required
    @api_errors
    def list_newsletters():
        return ok(container.newsletter_service.list())

    @app.route("/api/newsletters/forms", methods=["GET"], endpoint="api_newsletter_forms")
    @login_required
    @api_errors
    def forms():
        return ok([f.to_dict() for f in container.newsletter_service.available_forms()])

    @app.route("/api/newsletters/components/defaults", methods=["GET"], endpoint="api_newsletter_defaults")
    @login_required
    def component_defaults():
        return ok({t.value: builder.default_content(t) for t in builder.DEFAULT_CONTENT})

    @app.route("/api/newsletters/<int:newsletter_id>", methods=["GET"], endpoint="api_newsletter_get")
    @login_required
    @api_errors
    def get_newsletter(newsletter_id: int):
        return ok(container.newsletter_service.load(newsletter_id).to_dict())

    @app.route("/api/newsletters", methods=["POST"], endpoint="api_newsletter_create")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def create_newsletter():
        payload = request.get_json(silent=True) or {}
        newsletter_id = container.newsletter_service.save(
            title=payload.get("title", ""),
            description=payload.get("description"),
            campus=payload.get("campus"),
            components=_components(payload),
            form_ids=payload.get("form_ids") or [],
            created_by=current_user_id(),
        )
        return ok({"newsletter_id": newsletter_id}, status=201)

    @app.route("/api/newsletters/<int:newsletter_id>", methods=["PUT"], endpoint="api_newsletter_update")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def update_newsletter(newsletter_id: int):
        payload = request.get_json(silent=True) or {}
        container.newsletter_service.save(
            newsletter_id=newsletter_id,
            title=payload.get("title", ""),
            description=payload.get("description"),
            campus=payload.get("campus"),
            components=_components(payload),
            form_ids=payload.get("form_ids") or [],
        )
        return ok({"newsletter_id": newsletter_id})

    @app.route("/api/newsletters/<int:newsletter_id>", methods=["DELETE"], endpoint="api_newsletter_delete")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def delete_newsletter(newsletter_id: int):
        container.newsletter_service.delete(newsletter_id)
        return ok()

    @app.route("/api/newsletters/<int:newsletter_id>/send", methods=["POST"], endpoint="api_newsletter_send")
    @roles_required(*ADMIN_PROFILES)
    @api_errors
    def send_newsletter(newsletter_id: int):
        payload = request.get_json(silent=True) or {}
        outcome = container.newsletter_service.send(
            newsletter_id, payload.get("recipients") or [], from_name=payload.get("from_name")
        )
        return ok_outcome(outcome, {"recipients": outcome.value})

    @app.route("/api/newsletters/ai", methods=["POST"], endpoint="api_newsletter_ai")
    @login_required
    @api_errors
    def ask_ai():
        payload = request.get_json(silent=True) or {}
        answer = container.newsletter_service.ask_ai(payload.get("message", ""), payload.get("conversation_id"))
        return ok({"response": answer})
