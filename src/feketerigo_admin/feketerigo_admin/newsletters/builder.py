"""Editing operations on an ordered component list.

Lists are never mutated in place; every operation returns a new list whose
positions are renumbered 0..n-1.
"""

from __future__ import annotations

import copy
import uuid
from typing import Optional, Sequence

from ..core.enums import ComponentType
from ..core.exceptions import NotFoundError, ValidationError
from .model import NewsletterComponent

DEFAULT_CONTENT: dict[ComponentType, dict] = {
    ComponentType.HEADING: {
        "text": "Your Heading Here",
        "level": 2,
        "textAlign": "left",
        "color": "#1f2937",
    },
    ComponentType.TEXT_BLOCK: {
        "content": "Add your content here...",
        "fontSize": "16px",
        "fontWeight": "normal",
        "textAlign": "left",
        "color": "#374151",
    },
    ComponentType.IMAGE: {
        "url": "",
        "alt": "Newsletter image",
        "width": "100%",
        "height": "auto",
    },
    ComponentType.BUTTON: {
        "text": "Click Here",
        "url": "#",
        "backgroundColor": "#3b82f6",
        "textColor": "#ffffff",
        "size": "medium",
    },
    ComponentType.DIVIDER: {
        "style": "solid",
        "color": "#e5e7eb",
        "thickness": "1px",
    },
    ComponentType.FORM_SECTION: {
        "title": "Forms & Programs",
        "description": "",
        "buttonText": "Open Form",
        "textAlign": "left",
        "textColor": "#1f2937",
        "buttonBackgroundColor": "#3b82f6",
        "buttonTextColor": "#ffffff",
        "showDescription": True,
    },
    ComponentType.CALENDAR_BUTTON: {
        "buttonText": "Add to my calendar",
        "selectedCalendarId": "",
        "variant": "default",
    },
}


def default_content(component_type: ComponentType) -> dict:
    return copy.deepcopy(DEFAULT_CONTENT[component_type])


def new_component_id() -> str:
    return f"component-{uuid.uuid4().hex[:12]}"


def renumber(components: Sequence[NewsletterComponent]) -> list[NewsletterComponent]:
    return [
        NewsletterComponent(id=c.id, type=c.type, content=c.content, position=i)
        for i, c in enumerate(components)
    ]


def add_component(
    components: Sequence[NewsletterComponent],
    component_type: ComponentType | str,
    content: Optional[dict] = None,
    *,
    component_id: Optional[str] = None,
) -> list[NewsletterComponent]:
    try:
        ctype = ComponentType(component_type)
    except ValueError:
        raise ValidationError(f"Ismeretlen elemtípus: {component_type}")
    merged = default_content(ctype)
    merged.update(content or {})
    added = NewsletterComponent(
        id=component_id or new_component_id(),
        type=ctype,
        content=merged,
        position=len(components),
    )
    return renumber([*components, added])


def move_component(
    components: Sequence[NewsletterComponent], old_index: int, new_index: int
) -> list[NewsletterComponent]:
    items = list(components)
    if not items:
        return []
    if not (0 <= old_index < len(items)) or not (0 <= new_index < len(items)):
        raise ValidationError("Érvénytelen pozíció")
    item = items.pop(old_index)
    items.insert(new_index, item)
    return renumber(items)


def _index_of(components: Sequence[NewsletterComponent], component_id: str) -> int:
    for i, c in enumerate(components):
        if c.id == component_id:
            return i
    raise NotFoundError("Az elem nem található")


def update_component(
    components: Sequence[NewsletterComponent], component_id: str, content: dict
) -> list[NewsletterComponent]:
    items = list(components)
    i = _index_of(items, component_id)
    current = items[i]
    merged = dict(current.content)
    merged.update(content or {})
    items[i] = NewsletterComponent(id=current.id, type=current.type, content=merged, position=current.position)
    return renumber(items)


def remove_component(components: Sequence[NewsletterComponent], component_id: str) -> list[NewsletterComponent]:
    items = list(components)
    items.pop(_index_of(items, component_id))
    return renumber(items)
