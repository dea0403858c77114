from __future__ import annotations

import base64

from ..core.exceptions import RemoteFunctionError
from .functions import FunctionsClient


def extract_text(functions: FunctionsClient, data: bytes, mime_type: str) -> str:
    """OCR a document with `process-document`; the text sits at `document.text`."""

    body = functions.invoke(
        "process-document",
        {
            "document": {
                "content": base64.b64encode(data).decode("ascii"),
                "mimeType": mime_type or "application/octet-stream",
            }
        },
    )
    text = ((body.get("document") or {}).get("text") or "").strip()
    if not text:
        raise RemoteFunctionError("process-document", "A dokumentumból nem sikerült szöveget kinyerni")
    return text
