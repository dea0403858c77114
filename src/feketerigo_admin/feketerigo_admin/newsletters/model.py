from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import ComponentType


@dataclass(frozen=True)
class NewsletterComponent:
    """One content block of a newsletter; `position` is its index in the list."""

    id: str
    type: ComponentType
    content: dict
    position: int

    def to_dict(self) -> dict:
        return {"id": self.id, "type": self.type.value, "content": dict(self.content), "position": self.position}

    @classmethod
    def from_dict(cls, data: dict) -> "NewsletterComponent":
        return cls(
            id=str(data["id"]),
            type=ComponentType(data["type"]),
            content=dict(data.get("content") or {}),
            position=int(data.get("position", 0)),
        )


@dataclass(frozen=True)
class Newsletter:
    newsletter_id: int
    title: str
    campus: str
    description: Optional[str] = None
    components: list[NewsletterComponent] = field(default_factory=list)
    generated_html: Optional[str] = None
    form_ids: list[int] = field(default_factory=list)
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "newsletter_id": self.newsletter_id,
            "title": self.title,
            "description": self.description,
            "campus": self.campus,
            "components": [c.to_dict() for c in self.components],
            "generated_html": self.generated_html,
            "form_ids": list(self.form_ids),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class StoredNewsletter:
    """Newsletter row as persisted: structured JSON may be missing on old rows."""

    newsletter_id: int
    title: str
    campus: str
    description: Optional[str]
    components_json: Optional[str]
    generated_html: Optional[str]
    created_by: Optional[int] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class FormSummary:
    form_id: int
    title: str
    campus: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"form_id": self.form_id, "title": self.title, "description": self.description, "campus": self.campus}
