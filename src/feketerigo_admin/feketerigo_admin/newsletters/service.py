from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

from ..common.notices import Outcome
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_CAMPUS
from ..core.exceptions import NotFoundError, RemoteFunctionError, ValidationError
from ..platform.functions import FunctionsClient
from .builder import renumber
from .model import FormSummary, Newsletter, NewsletterComponent, StoredNewsletter
from .parser import parse_html
from .renderer import render_html
from .repository import FormRepository, NewsletterRepository

logger = logging.getLogger("feketerigo_admin.newsletters")

DEFAULT_SENDER_NAME = "Feketerigó Alapítványi Óvoda"


class NewsletterService:
    """Newsletter persistence, form links, e-mail sending and the AI writing helper."""

    def __init__(self, newsletters: NewsletterRepository, forms: FormRepository, functions: FunctionsClient):
        self._newsletters = newsletters
        self._forms = forms
        self._functions = functions

    def available_forms(self) -> list[FormSummary]:
        return list(self._forms.list_active())

    def save(
        self,
        *,
        title: str,
        components: Sequence[NewsletterComponent],
        description: Optional[str] = None,
        campus: Optional[str] = None,
        form_ids: Sequence[int] = (),
        newsletter_id: Optional[int] = None,
        created_by: Optional[int] = None,
    ) -> int:
        title = require_non_empty(title, "A hírlevél címe")
        description = (description or "").strip() or None
        campus = (campus or "").strip() or DEFAULT_CAMPUS
        ordered = renumber(sorted(components, key=lambda c: c.position))

        selected_ids = {int(f) for f in form_ids}
        linked_forms = [f for f in self.available_forms() if f.form_id in selected_ids]
        html = render_html(title, description, ordered, forms=linked_forms)
        components_json = json.dumps([c.to_dict() for c in ordered], ensure_ascii=False)

        if newsletter_id is None:
            newsletter_id = self._newsletters.create(
                title=title,
                description=description,
                campus=campus,
                components_json=components_json,
                generated_html=html,
                created_by=created_by,
            )
            logger.info("Newsletter #%s created (%d components)", newsletter_id, len(ordered))
        else:
            if not self._newsletters.get(newsletter_id):
                raise NotFoundError("A hírlevél nem található")
            self._newsletters.update(
                newsletter_id,
                title=title,
                description=description,
                campus=campus,
                components_json=components_json,
                generated_html=html,
            )
            logger.info("Newsletter #%s updated (%d components)", newsletter_id, len(ordered))

        self._newsletters.replace_forms(newsletter_id, sorted(selected_ids))
        return newsletter_id

    def load(self, newsletter_id: int) -> Newsletter:
        stored = self._newsletters.get(newsletter_id)
        if not stored:
            raise NotFoundError("A hírlevél nem található")
        return Newsletter(
            newsletter_id=stored.newsletter_id,
            title=stored.title,
            description=stored.description,
            campus=stored.campus,
            components=self._components_of(stored),
            generated_html=stored.generated_html,
            form_ids=self._newsletters.form_ids(newsletter_id),
            created_by=stored.created_by,
            updated_at=stored.updated_at,
        )

    def list(self) -> list[dict]:
        return [
            {
                "newsletter_id": n.newsletter_id,
                "title": n.title,
                "description": n.description,
                "campus": n.campus,
                "updated_at": n.updated_at.isoformat() if n.updated_at else None,
            }
            for n in self._newsletters.list_all()
        ]

    def delete(self, newsletter_id: int) -> None:
        if not self._newsletters.delete(newsletter_id):
            raise NotFoundError("A hírlevél nem található")
        logger.info("Newsletter #%s deleted", newsletter_id)

    def send(self, newsletter_id: int, recipients: Sequence[str], *, from_name: Optional[str] = None) -> Outcome:
        addresses = [r.strip() for r in recipients if r and r.strip()]
        if not addresses:
            raise ValidationError("Legalább egy címzett megadása kötelező")
        invalid = [a for a in addresses if "@" not in a]
        if invalid:
            raise ValidationError(f"Érvénytelen e-mail cím: {invalid[0]}")

        newsletter = self.load(newsletter_id)
        html = newsletter.generated_html or render_html(
            newsletter.title, newsletter.description, newsletter.components
        )
        self._functions.invoke(
            "send-gmail",
            {
                "to": addresses,
                "subject": newsletter.title,
                "htmlContent": html,
                "fromName": from_name or DEFAULT_SENDER_NAME,
            },
        )
        logger.info("Newsletter #%s sent to %d recipients", newsletter_id, len(addresses))
        outcome = Outcome(value=len(addresses))
        outcome.success(f"Hírlevél elküldve {len(addresses)} címzettnek")
        return outcome

    def ask_ai(self, message: str, conversation_id: Optional[str] = None) -> str:
        message = require_non_empty(message, "Üzenet")
        body = self._functions.invoke("chat-ai", {"message": message, "conversationId": conversation_id})
        answer = body.get("response")
        if not isinstance(answer, str) or not answer.strip():
            raise RemoteFunctionError("chat-ai", "Az AI asszisztens nem adott választ")
        return answer

    @staticmethod
    def _components_of(stored: StoredNewsletter) -> list[NewsletterComponent]:
        if stored.components_json:
            try:
                raw = json.loads(stored.components_json)
                return renumber(
                    sorted((NewsletterComponent.from_dict(c) for c in raw), key=lambda c: c.position)
                )
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Newsletter #%s has unreadable components JSON: %s", stored.newsletter_id, e)
        return parse_html(stored.generated_html)
