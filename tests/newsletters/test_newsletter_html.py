import pytest

from src.feketerigo_admin.feketerigo_admin.core.enums import ComponentType
from src.feketerigo_admin.feketerigo_admin.core.exceptions import ValidationError
from src.feketerigo_admin.feketerigo_admin.newsletters.builder import (
    add_component,
    move_component,
    remove_component,
    update_component,
)
from src.feketerigo_admin.feketerigo_admin.newsletters.model import FormSummary
from src.feketerigo_admin.feketerigo_admin.newsletters.parser import parse_html, parse_style
from src.feketerigo_admin.feketerigo_admin.newsletters.renderer import render_html


def _sample():
    items = []
    items = add_component(items, ComponentType.HEADING, {"text": "Tavaszi hírek", "level": 2, "color": "#111111"})
    items = add_component(items, ComponentType.TEXT_BLOCK, {"content": "Kedves <b>Szülők</b>!"})
    items = add_component(items, ComponentType.IMAGE, {"url": "https://example.org/kep.jpg", "alt": "Kert"})
    items = add_component(items, ComponentType.DIVIDER, {"style": "dashed", "color": "#cccccc"})
    items = add_component(items, ComponentType.BUTTON, {"text": "Részletek", "url": "https://example.org"})
    return items


def test_rendered_html_parses_back_to_same_types_and_positions():
    components = _sample()

    html = render_html("Hírlevél", "Márciusi szám", components)
    parsed = parse_html(html)

    assert [(c.type, c.position) for c in parsed] == [(c.type, c.position) for c in components]
    assert parsed[0].content["text"] == "Tavaszi hírek"
    assert parsed[0].content["color"] == "#111111"
    assert parsed[1].content["content"] == "Kedves <b>Szülők</b>!"
    assert parsed[2].content["url"] == "https://example.org/kep.jpg"
    assert parsed[3].content["style"] == "dashed"
    assert parsed[4].content["url"] == "https://example.org"


def test_parser_skips_title_header_and_marked_components():
    components = add_component(_sample(), ComponentType.FORM_SECTION, {"title": "Programok"})
    components = add_component(components, ComponentType.CALENDAR_BUTTON, {"selectedCalendarId": "abc"})
    forms = [FormSummary(form_id=3, title="Nyári tábor", campus="Feketerigó", description="Jelentkezés")]

    html = render_html("Hírlevél", None, components, forms=forms)
    parsed = parse_html(html)

    assert "Nyári tábor" in html
    assert [c.type for c in parsed] == [c.type for c in _sample()]
    assert all(c.content.get("text") != "Hírlevél" for c in parsed)


def test_parse_empty_html_gives_no_components():
    assert parse_html("") == []
    assert parse_html(None) == []


def test_parse_style_lowercases_keys():
    assert parse_style("Color: red; TEXT-ALIGN: center;") == {"color": "red", "text-align": "center"}


def test_render_orders_by_position():
    first, second = _sample()[:2]
    html = render_html("T", None, [second, first])
    assert html.index("Tavaszi hírek") < html.index("Kedves")


def test_move_renumbers_positions():
    items = _sample()
    moved = move_component(items, 4, 0)

    assert moved[0].type == ComponentType.BUTTON
    assert [c.position for c in moved] == list(range(len(items)))
    assert [c.position for c in items] == list(range(len(items)))


def test_move_out_of_range_is_rejected():
    with pytest.raises(ValidationError):
        move_component(_sample(), 0, 10)


def test_update_and_remove_keep_positions_dense():
    items = _sample()
    updated = update_component(items, items[0].id, {"text": "Új cím"})
    assert updated[0].content["text"] == "Új cím"
    assert updated[0].content["level"] == 2

    removed = remove_component(updated, items[1].id)
    assert [c.position for c in removed] == [0, 1, 2, 3]


def test_added_component_gets_defaults():
    items = add_component([], "button")
    assert items[0].content["backgroundColor"] == "#3b82f6"
    with pytest.raises(ValidationError):
        add_component([], "video")


def test_components_after_marked_block_keep_their_positions():
    components = add_component([], ComponentType.HEADING, {"text": "Programok"})
    components = add_component(components, ComponentType.FORM_SECTION, {"title": "Jelentkezés"})
    components = add_component(components, ComponentType.TEXT_BLOCK, {"content": "Várunk mindenkit"})
    components = add_component(components, ComponentType.CALENDAR_BUTTON, {"selectedCalendarId": "abc"})
    components = add_component(components, ComponentType.DIVIDER, {})

    parsed = parse_html(render_html("Hírlevél", None, components))

    assert [(c.type, c.position) for c in parsed] == [
        (ComponentType.HEADING, 0),
        (ComponentType.TEXT_BLOCK, 2),
        (ComponentType.DIVIDER, 4),
    ]


def test_title_description_and_heading_text_are_escaped():
    components = add_component([], ComponentType.HEADING, {"text": "Kicsik & <nagyok>"})
    components = add_component(components, ComponentType.TEXT_BLOCK, {"content": "<b>marad</b>"})

    html = render_html("<script>alert(1)</script>", "A & B", components)

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "A &amp; B" in html
    assert "Kicsik &amp; &lt;nagyok&gt;" in html
    assert "<b>marad</b>" in html
    assert parse_html(html)[0].content["text"] == "Kicsik & <nagyok>"
