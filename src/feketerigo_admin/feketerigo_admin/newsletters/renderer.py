from __future__ import annotations

from html import escape
from typing import Optional, Sequence

from ..core.enums import ComponentType
from .model import FormSummary, NewsletterComponent

HEADER_STYLE = "text-align: center; padding: 20px; background: linear-gradient(to right, #f0f9ff, #f0fdf4);"


def _attr(value) -> str:
    return escape(str(value if value is not None else ""), quote=True)


def _text(value) -> str:
    return escape(str(value if value is not None else ""), quote=False)


def _form_section(content: dict, forms: Sequence[FormSummary]) -> str:
    color = content.get("textColor", "#1f2937")
    align = content.get("textAlign", "left")
    parts = [
        f'<section data-component="form-section" style="color: {color}; text-align: {align}; padding: 20px;">',
        f'<h3>{_text(content.get("title"))}</h3>',
    ]
    if content.get("description"):
        parts.append(f'<p>{_text(content["description"])}</p>')
    for form in forms:
        parts.append('<div style="padding: 16px; border: 1px solid #e5e7eb; border-radius: 8px;">')
        parts.append(f"<h4>{_text(form.title)}</h4>")
        if content.get("showDescription", True) and form.description:
            parts.append(f"<p>{_text(form.description)}</p>")
        parts.append(
            f'<a href="/form/{form.form_id}" style="display: inline-block; '
            f'background-color: {content.get("buttonBackgroundColor", "#3b82f6")}; '
            f'color: {content.get("buttonTextColor", "#ffffff")}; padding: 8px 16px; '
            f'text-decoration: none; border-radius: 4px;">{_text(content.get("buttonText"))}</a>'
        )
        parts.append("</div>")
    parts.append("</section>")
    return "".join(parts)


def render_component(component: NewsletterComponent, forms: Sequence[FormSummary] = ()) -> str:
    c = component.content
    t = component.type
    if t == ComponentType.HEADING:
        level = int(c.get("level", 2))
        return f'<h{level} style="color: {c.get("color")}; text-align: {c.get("textAlign")};">{_text(c.get("text"))}</h{level}>'
    if t == ComponentType.TEXT_BLOCK:
        return (
            f'<div style="font-size: {c.get("fontSize")}; color: {c.get("color")}; '
            f'text-align: {c.get("textAlign")};">{c.get("content", "")}</div>'
        )
    if t == ComponentType.IMAGE:
        return f'<img src="{_attr(c.get("url"))}" alt="{_attr(c.get("alt"))}" style="width: {c.get("width")};" />'
    if t == ComponentType.BUTTON:
        return (
            f'<a href="{_attr(c.get("url"))}" style="display: inline-block; background-color: {c.get("backgroundColor")}; '
            f'color: {c.get("textColor")}; padding: 12px 24px; text-decoration: none; border-radius: 4px;">'
            f'{_text(c.get("text"))}</a>'
        )
    if t == ComponentType.DIVIDER:
        return f'<hr style="border: {c.get("thickness")} {c.get("style")} {c.get("color")};" />'
    if t == ComponentType.FORM_SECTION:
        return _form_section(c, forms)
    if t == ComponentType.CALENDAR_BUTTON:
        calendar_id = c.get("selectedCalendarId") or ""
        href = f"https://calendar.google.com/calendar/r?cid={_attr(calendar_id)}" if calendar_id else "#"
        return (
            f'<a data-component="calendar-button" href="{href}" style="display: inline-block; '
            f'background-color: #ffffff; color: #1f2937; padding: 12px 24px; text-decoration: none; '
            f'border: 1px solid #e5e7eb; border-radius: 4px;">{_text(c.get("buttonText"))}</a>'
        )
    return ""


def render_html(
    title: str,
    description: Optional[str],
    components: Sequence[NewsletterComponent],
    *,
    forms: Sequence[FormSummary] = (),
) -> str:
    ordered = sorted(components, key=lambda comp: comp.position)
    components_html = "\n".join(render_component(comp, forms) for comp in ordered)
    description_html = f'<p style="color: #6b7280;">{_text(description)}</p>' if description else ""
    return f"""
      <div style="max-width: 600px; margin: 0 auto; font-family: Arial, sans-serif;">
        <div style="{HEADER_STYLE}">
          <h1 style="color: #1f2937; margin-bottom: 10px;">{_text(title)}</h1>
          {description_html}
        </div>
        <div style="padding: 20px;">
          {components_html}
        </div>
      </div>
    """
