"""Best-effort HTML -> component reconstruction for newsletters saved without JSON.

Lossy: only headings, styled text divs, images, anchors and horizontal rules
are recognized. Anything marked with `data-component` (form sections,
calendar buttons) and the title header block are skipped; a skipped block
still takes up its position, so recovered components keep their DOM order index.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag

from ..core.enums import ComponentType
from .builder import default_content, new_component_id
from .model import NewsletterComponent

logger = logging.getLogger("feketerigo_admin.newsletters.parser")

_HEADINGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def parse_style(style: Optional[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for part in (style or "").split(";"):
        if ":" not in part:
            continue
        key, value = part.split(":", 1)
        key = key.strip().lower()
        if key:
            out[key] = value.strip()
    return out


def _is_header(tag: Tag) -> bool:
    return tag.name == "div" and "linear-gradient" in (tag.get("style") or "")


def _component(ctype: ComponentType, content: dict) -> NewsletterComponent:
    merged = default_content(ctype)
    merged.update({k: v for k, v in content.items() if v not in (None, "")})
    return NewsletterComponent(id=new_component_id(), type=ctype, content=merged, position=0)


def _recognize(tag: Tag) -> Optional[NewsletterComponent]:
    style = parse_style(tag.get("style"))
    if tag.name in _HEADINGS:
        return _component(
            ComponentType.HEADING,
            {
                "text": tag.get_text(strip=True),
                "level": int(tag.name[1]),
                "color": style.get("color"),
                "textAlign": style.get("text-align"),
            },
        )
    if tag.name == "div" and "font-size" in style:
        return _component(
            ComponentType.TEXT_BLOCK,
            {
                "content": tag.decode_contents().strip(),
                "fontSize": style.get("font-size"),
                "color": style.get("color"),
                "textAlign": style.get("text-align"),
            },
        )
    if tag.name == "img":
        return _component(
            ComponentType.IMAGE,
            {"url": tag.get("src", ""), "alt": tag.get("alt"), "width": style.get("width")},
        )
    if tag.name == "a":
        return _component(
            ComponentType.BUTTON,
            {
                "text": tag.get_text(strip=True),
                "url": tag.get("href"),
                "backgroundColor": style.get("background-color"),
                "textColor": style.get("color"),
            },
        )
    if tag.name == "hr":
        content = {}
        parts = style.get("border", "").split()
        if len(parts) == 3:
            content = {"thickness": parts[0], "style": parts[1], "color": parts[2]}
        return _component(ComponentType.DIVIDER, content)
    return None


def _walk(node: Tag) -> Iterator[Optional[NewsletterComponent]]:
    # None marks a skipped `data-component` block so later positions stay in DOM order
    for child in node.children:
        if not isinstance(child, Tag) or _is_header(child):
            continue
        if child.has_attr("data-component"):
            yield None
            continue
        found = _recognize(child)
        if found:
            yield found
            continue
        yield from _walk(child)


def parse_html(html: Optional[str]) -> list[NewsletterComponent]:
    if not html or not html.strip():
        return []
    soup = BeautifulSoup(html, "html.parser")
    found = [
        NewsletterComponent(id=c.id, type=c.type, content=c.content, position=i)
        for i, c in enumerate(_walk(soup))
        if c is not None
    ]
    logger.debug("Recovered %d components from stored HTML", len(found))
    return found
