"""Component rendering.

Maps one :class:`~appforge.spec.models.AppComponent` (and, for containers,
its whole subtree) to a block of React Native JSX. Rendering is purely
textual: handler expressions such as ``onPress`` or ``renderItem`` are
foreign source fragments inserted verbatim, never parsed.

Every line of a fragment is indented by two spaces per nesting level so the
fragment can be dropped into any parent at the matching depth.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

from appforge.spec.models import AppComponent, ComponentKind, ListContent, TextContent


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300x200"
NOOP_PRESS_HANDLER = "() => {}"
NOOP_CHANGE_HANDLER = "text => {}"
DEFAULT_RENDER_ITEM = "({ item }) => <Text>{item}</Text>"
DEFAULT_KEY_EXTRACTOR = "(item, index) => index.toString()"

INDENT = "  "

_JSX_SPECIAL = set("{}<>")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_component(component: AppComponent, level: int = 0) -> str:
    """Render *component* as JSX indented for nesting *level*.

    Never raises for malformed component data: unknown kinds and
    non-list ``List`` content degrade to readable ``Text`` fragments.
    """
    builder = _BUILDERS.get(component.kind, _render_unknown)
    return builder(component, level)


def render_children(component: AppComponent, level: int) -> str:
    """Render every child of *component* one level deeper, newline-joined."""
    return "\n".join(render_component(child, level + 1) for child in component.children)


def press_handler(component: AppComponent) -> str:
    """Return the ``onPress`` arrow function for a pressable component.

    ``navigateTo`` takes precedence over ``onPress`` and only ``Button``
    supports it; without either the handler is a no-op.
    """
    if component.kind is ComponentKind.BUTTON and component.navigate_to:
        return f"() => navigation.navigate({js_string(component.navigate_to)})"
    if component.on_press:
        return f"() => {component.on_press}"
    return NOOP_PRESS_HANDLER


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------

def js_string(value: str) -> str:
    """Quote *value* as a JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def jsx_text(value: str) -> str:
    """Return *value* as JSX child text.

    Plain text is inserted as-is; text containing braces or angle brackets is
    wrapped in a string expression so the surrounding markup stays valid.
    """
    if _JSX_SPECIAL.intersection(value):
        return "{" + js_string(value) + "}"
    return value


def jsx_attr(value: str) -> str:
    """Return *value* as a JSX attribute value (``"..."`` or ``{"..."}``)."""
    if '"' in value or "\n" in value:
        return "{" + js_string(value) + "}"
    return f'"{value}"'


def style_attr(base: Optional[str], extra: Optional[dict[str, Any]]) -> str:
    """Build a ``style={...}`` attribute merging a stylesheet key with inline style.

    Returns an empty string when there is nothing to apply.
    """
    inline = json.dumps(extra, ensure_ascii=False) if extra else None
    if base and inline:
        return f"style={{[styles.{base}, {inline}]}}"
    if base:
        return f"style={{styles.{base}}}"
    if inline:
        return f"style={{{inline}}}"
    return ""


def _text_of(component: AppComponent) -> str:
    content = component.content
    if isinstance(content, ListContent):
        return ", ".join(content.root)
    if isinstance(content, TextContent):
        return content.root
    return ""


def _open(tag: str, *attrs: str) -> str:
    parts = [tag, *(a for a in attrs if a)]
    return "<" + " ".join(parts) + ">"


def _indent(level: int) -> str:
    return INDENT * level


def _block(level: int, lines: list[str]) -> str:
    """Indent each line of a multi-line fragment to *level*."""
    pad = _indent(level)
    return "\n".join(pad + line for line in lines)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def _render_text(style: str) -> Callable[[AppComponent, int], str]:
    def build(component: AppComponent, level: int) -> str:
        tag = _open("Text", style_attr(style, component.style))
        return f"{_indent(level)}{tag}{jsx_text(_text_of(component))}</Text>"
    return build


def _render_button(component: AppComponent, level: int) -> str:
    tag = _open(
        "TouchableOpacity",
        style_attr("button", component.style),
        f"onPress={{{press_handler(component)}}}",
    )
    return _block(level, [
        tag,
        f"{INDENT}<Text style={{styles.buttonText}}>{jsx_text(_text_of(component))}</Text>",
        "</TouchableOpacity>",
    ])


def _render_list(component: AppComponent, level: int) -> str:
    content = component.content
    if isinstance(content, TextContent):
        # Malformed input: a single string where rows were expected.
        return _render_text("text")(component, level)

    rows = content.root if isinstance(content, ListContent) else []
    lines = ["<FlatList"]
    if component.style:
        lines.append(f"{INDENT}{style_attr(None, component.style)}")
    lines.extend([
        f"{INDENT}data={{{json.dumps(rows, ensure_ascii=False)}}}",
        f"{INDENT}renderItem={{({{ item }}) => (",
        f"{INDENT * 2}<View style={{styles.listItem}}>",
        f"{INDENT * 3}<Text style={{styles.listItemText}}>{{item}}</Text>",
        f"{INDENT * 2}</View>",
        f"{INDENT})}}",
        f"{INDENT}keyExtractor={{{DEFAULT_KEY_EXTRACTOR}}}",
        "/>",
    ])
    return _block(level, lines)


def _render_text_input(component: AppComponent, level: int) -> str:
    return _block(level, [
        "<TextInput",
        f"{INDENT}{style_attr('input', component.style)}",
        f"{INDENT}placeholder={jsx_attr(component.placeholder or '')}",
        f"{INDENT}value={{{component.value or repr('')}}}",
        f"{INDENT}onChangeText={{{component.on_change_text or NOOP_CHANGE_HANDLER}}}",
        "/>",
    ])


def _render_image(component: AppComponent, level: int) -> str:
    uri = component.source or PLACEHOLDER_IMAGE_URL
    lines = [
        "<Image",
        f"{INDENT}source={{{{ uri: {js_string(uri)} }}}}",
        f"{INDENT}{style_attr('image', component.style)}",
        f'{INDENT}resizeMode="cover"',
    ]
    if component.alt:
        lines.append(f"{INDENT}accessibilityLabel={jsx_attr(component.alt)}")
    lines.append("/>")
    return _block(level, lines)


def _render_flat_list(component: AppComponent, level: int) -> str:
    lines = ["<FlatList"]
    if component.style:
        lines.append(f"{INDENT}{style_attr(None, component.style)}")
    lines.extend([
        f"{INDENT}data={{{json.dumps(component.data or [], ensure_ascii=False)}}}",
        f"{INDENT}renderItem={{{component.render_item or DEFAULT_RENDER_ITEM}}}",
        f"{INDENT}keyExtractor={{{component.key_extractor or DEFAULT_KEY_EXTRACTOR}}}",
        "/>",
    ])
    return _block(level, lines)


def _render_container(
    tag: str, base_style: Optional[str], pressable: bool = False
) -> Callable[[AppComponent, int], str]:
    def build(component: AppComponent, level: int) -> str:
        attrs = [style_attr(base_style, component.style)]
        if pressable:
            attrs.append(f"onPress={{{press_handler(component)}}}")
        pad = _indent(level)
        parts = [pad + _open(tag, *attrs)]
        if component.children:
            parts.append(render_children(component, level))
        parts.append(f"{pad}</{tag}>")
        return "\n".join(parts)
    return build


def _render_unknown(component: AppComponent, level: int) -> str:
    label = jsx_text(f"Unsupported component: {component.type}")
    return f"{_indent(level)}<Text style={{styles.text}}>{label}</Text>"


_BUILDERS: dict[ComponentKind, Callable[[AppComponent, int], str]] = {
    ComponentKind.TITLE: _render_text("title"),
    ComponentKind.TEXT: _render_text("text"),
    ComponentKind.BUTTON: _render_button,
    ComponentKind.LIST: _render_list,
    ComponentKind.TEXT_INPUT: _render_text_input,
    ComponentKind.IMAGE: _render_image,
    ComponentKind.CARD: _render_container("Card", None),
    ComponentKind.SCROLL_VIEW: _render_container("ScrollView", None),
    ComponentKind.VIEW: _render_container("View", None),
    ComponentKind.TOUCHABLE_OPACITY: _render_container("TouchableOpacity", None, pressable=True),
    ComponentKind.SAFE_AREA_VIEW: _render_container("SafeAreaView", "container"),
    ComponentKind.FLAT_LIST: _render_flat_list,
    ComponentKind.UNKNOWN: _render_unknown,
}
