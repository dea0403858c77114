from __future__ import annotations

import json

import pytest
import requests

from src.feketerigo_admin.feketerigo_admin.core.exceptions import RemoteFunctionError, UnexpectedContentTypeError
from src.feketerigo_admin.feketerigo_admin.platform.documents import extract_text
from src.feketerigo_admin.feketerigo_admin.platform.functions import FunctionsClient


class FakeResponse:
    def __init__(self, body, *, status_code=200, content_type="application/json; charset=utf-8"):
        self.status_code = status_code
        self.headers = {"content-type": content_type} if content_type else {}
        self.text = body if isinstance(body, str) else json.dumps(body)
        self._body = body

    def json(self):
        if isinstance(self._body, str):
            return json.loads(self._body)
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, *, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def _client(session):
    return FunctionsClient("https://platform.example/", "secret", timeout=5, session=session)


def test_successful_call_returns_body_and_sends_bearer_key():
    session = FakeSession(FakeResponse({"success": True, "data": [1]}))

    body = _client(session).invoke("payroll-gemini", {"extractedText": "x"})

    assert body["data"] == [1]
    sent = session.posts[0]
    assert sent["url"] == "https://platform.example/functions/v1/payroll-gemini"
    assert sent["headers"]["Authorization"] == "Bearer secret"
    assert sent["json"] == {"extractedText": "x"}
    assert sent["timeout"] == 5


def test_html_answer_raises_unexpected_content_type():
    session = FakeSession(FakeResponse("<html>502</html>", content_type="text/html"))

    with pytest.raises(UnexpectedContentTypeError) as exc:
        _client(session).invoke("backup-invoices")

    assert exc.value.content_type == "text/html"
    assert exc.value.function_name == "backup-invoices"


def test_missing_content_type_is_unexpected():
    session = FakeSession(FakeResponse({"success": True}, content_type=None))

    with pytest.raises(UnexpectedContentTypeError) as exc:
        _client(session).invoke("setup-backup-cron")

    assert exc.value.content_type == "unknown"


def test_success_false_raises_with_error_message():
    session = FakeSession(FakeResponse({"success": False, "error": "Kvóta túllépve"}))

    with pytest.raises(RemoteFunctionError, match="Kvóta túllépve"):
        _client(session).invoke("tax-gemini")


def test_http_error_status_raises():
    session = FakeSession(FakeResponse({"error": "boom"}, status_code=500))

    with pytest.raises(RemoteFunctionError, match="boom"):
        _client(session).invoke("tax-gemini")


def test_bare_error_key_raises():
    session = FakeSession(FakeResponse({"error": "nincs jogosultság"}))

    with pytest.raises(RemoteFunctionError):
        _client(session).invoke("chat-ai")


def test_malformed_json_raises():
    session = FakeSession(FakeResponse("{not json"))

    with pytest.raises(RemoteFunctionError):
        _client(session).invoke("chat-ai")


def test_network_failure_raises():
    session = FakeSession(error=requests.ConnectionError("refused"))

    with pytest.raises(RemoteFunctionError):
        _client(session).invoke("chat-ai")


def test_extract_text_sends_base64_document():
    session = FakeSession(FakeResponse({"success": True, "document": {"text": "  Számla  "}}))

    text = extract_text(_client(session), b"abc", "application/pdf")

    assert text == "Számla"
    assert session.posts[0]["json"] == {"document": {"content": "YWJj", "mimeType": "application/pdf"}}


def test_extract_text_rejects_empty_text():
    session = FakeSession(FakeResponse({"success": True, "document": {"text": ""}}))

    with pytest.raises(RemoteFunctionError):
        extract_text(_client(session), b"abc", "application/pdf")
