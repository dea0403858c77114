from __future__ import annotations

import json

import pytest

from src.feketerigo_admin.feketerigo_admin.core.enums import ComponentType
from src.feketerigo_admin.feketerigo_admin.core.exceptions import NotFoundError, ValidationError
from src.feketerigo_admin.feketerigo_admin.newsletters.builder import add_component
from src.feketerigo_admin.feketerigo_admin.newsletters.model import FormSummary, StoredNewsletter
from src.feketerigo_admin.feketerigo_admin.newsletters.service import NewsletterService


class InMemoryNewsletters:
    def __init__(self):
        self.rows: dict[int, StoredNewsletter] = {}
        self.links: dict[int, list[int]] = {}

    def create(self, *, title, description, campus, components_json, generated_html, created_by):
        newsletter_id = len(self.rows) + 1
        self.rows[newsletter_id] = StoredNewsletter(
            newsletter_id, title, campus, description, components_json, generated_html, created_by
        )
        return newsletter_id

    def update(self, newsletter_id, *, title, description, campus, components_json, generated_html):
        self.rows[newsletter_id] = StoredNewsletter(
            newsletter_id, title, campus, description, components_json, generated_html
        )
        return True

    def get(self, newsletter_id):
        return self.rows.get(newsletter_id)

    def list_all(self):
        return list(self.rows.values())

    def delete(self, newsletter_id):
        return self.rows.pop(newsletter_id, None) is not None

    def form_ids(self, newsletter_id):
        return list(self.links.get(newsletter_id, []))

    def replace_forms(self, newsletter_id, form_ids):
        self.links[newsletter_id] = list(form_ids)


class StaticForms:
    def list_active(self):
        return [FormSummary(form_id=1, title="Nyári tábor", campus="Feketerigó")]


class RecordingFunctions:
    def __init__(self, body=None):
        self.body = body or {"success": True}
        self.calls = []

    def invoke(self, name, payload=None):
        self.calls.append((name, payload))
        return self.body


def _components():
    items = add_component([], ComponentType.HEADING, {"text": "Hírek"})
    return add_component(items, ComponentType.TEXT_BLOCK, {"content": "Szia"})


def test_save_stores_json_html_and_form_links():
    repo = InMemoryNewsletters()
    svc = NewsletterService(repo, StaticForms(), RecordingFunctions())

    newsletter_id = svc.save(title="Március", components=_components(), form_ids=[1])

    stored = repo.get(newsletter_id)
    assert [c["type"] for c in json.loads(stored.components_json)] == ["heading", "text-block"]
    assert "Nyári tábor" not in stored.generated_html
    assert repo.form_ids(newsletter_id) == [1]
    assert stored.campus == "Feketerigó"


def test_load_falls_back_to_html_when_json_is_missing():
    repo = InMemoryNewsletters()
    svc = NewsletterService(repo, StaticForms(), RecordingFunctions())
    newsletter_id = svc.save(title="Március", components=_components())
    old = repo.rows[newsletter_id]
    repo.rows[newsletter_id] = StoredNewsletter(
        old.newsletter_id, old.title, old.campus, old.description, None, old.generated_html
    )

    loaded = svc.load(newsletter_id)

    assert [(c.type, c.position) for c in loaded.components] == [
        (ComponentType.HEADING, 0),
        (ComponentType.TEXT_BLOCK, 1),
    ]


def test_send_posts_rendered_html_to_mail_function():
    repo = InMemoryNewsletters()
    functions = RecordingFunctions()
    svc = NewsletterService(repo, StaticForms(), functions)
    newsletter_id = svc.save(title="Március", components=_components())

    outcome = svc.send(newsletter_id, ["szulo@example.org", " "])

    name, payload = functions.calls[-1]
    assert name == "send-gmail"
    assert payload["to"] == ["szulo@example.org"]
    assert payload["subject"] == "Március"
    assert outcome.value == 1


def test_send_rejects_invalid_address():
    svc = NewsletterService(InMemoryNewsletters(), StaticForms(), RecordingFunctions())
    with pytest.raises(ValidationError):
        svc.send(1, ["nem-email"])


def test_update_of_missing_newsletter_raises():
    svc = NewsletterService(InMemoryNewsletters(), StaticForms(), RecordingFunctions())
    with pytest.raises(NotFoundError):
        svc.save(title="X", components=[], newsletter_id=5)


def test_ask_ai_returns_response_text():
    functions = RecordingFunctions({"success": True, "response": "Íme egy javaslat"})
    svc = NewsletterService(InMemoryNewsletters(), StaticForms(), functions)

    assert svc.ask_ai("Írj bevezetőt") == "Íme egy javaslat"
    assert functions.calls[0][0] == "chat-ai"
