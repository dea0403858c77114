from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.exceptions import RemoteFunctionError, UnexpectedContentTypeError

logger = logging.getLogger("feketerigo_admin.platform.functions")


class FunctionsClient:
    """Calls the hosted serverless functions (`/functions/v1/<name>`).

    Every function answers with a JSON envelope. The envelope is checked here
    so services only ever see the successful body:

    * a non-JSON answer raises UnexpectedContentTypeError (checked before parsing)
    * HTTP errors, `success: false` and a bare `error` key raise RemoteFunctionError
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self._base_url = (base_url or "").rstrip("/")
        self._api_key = api_key or ""
        self._timeout = timeout
        self._session = session or requests.Session()

    def url_for(self, name: str) -> str:
        return f"{self._base_url}/functions/v1/{name}"

    def invoke(self, name: str, payload: Optional[dict] = None) -> dict:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        logger.debug("Invoking function %s", name)
        try:
            resp = self._session.post(
                self.url_for(name),
                json=payload if payload is not None else {},
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("Function %s could not be reached: %s", name, e)
            raise RemoteFunctionError(name, f"A(z) {name} funkció nem érhető el: {e}") from e

        content_type = resp.headers.get("content-type")
        if not content_type or "application/json" not in content_type:
            logger.error(
                "Function %s returned non-JSON content (%s): %s",
                name,
                content_type or "unknown",
                (resp.text or "")[:500],
            )
            raise UnexpectedContentTypeError(name, content_type)

        try:
            body: Any = resp.json()
        except ValueError as e:
            logger.error("Function %s returned malformed JSON", name)
            raise RemoteFunctionError(name, f"A(z) {name} funkció hibás választ adott") from e

        if not isinstance(body, dict):
            raise RemoteFunctionError(name, f"A(z) {name} funkció hibás választ adott")

        if resp.status_code >= 400:
            message = body.get("error") or f"A(z) {name} funkció hibával tért vissza ({resp.status_code})"
            logger.error("Function %s failed with HTTP %s: %s", name, resp.status_code, message)
            raise RemoteFunctionError(name, str(message))

        if body.get("success") is False:
            message = body.get("error") or f"A(z) {name} funkció sikertelen"
            logger.error("Function %s reported failure: %s", name, message)
            raise RemoteFunctionError(name, str(message))

        if "success" not in body and body.get("error"):
            logger.error("Function %s reported error: %s", name, body["error"])
            raise RemoteFunctionError(name, str(body["error"]))

        return body
