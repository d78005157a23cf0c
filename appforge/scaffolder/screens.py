"""Screen module generation.

Composes the component renderer over a screen's whole tree, works out which
React Native primitives and hooks the module needs, and wraps the result in
the fixed ``SafeAreaView`` / ``ScrollView`` screen template.

Each screen becomes ``screens/<Name>Screen.js``, where ``<Name>`` is the
screen's ``name``.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from appforge.spec.models import AppComponent, AppSpecification, ComponentKind, Screen

from .components import render_component
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Import requirements
# ---------------------------------------------------------------------------

# Primitives the screen wrapper itself always uses.
WRAPPER_PRIMITIVES: frozenset[str] = frozenset({"SafeAreaView", "ScrollView", "StyleSheet"})

# Card is the generated components/Card.js, not a react-native primitive.
_PRIMITIVES_BY_KIND: dict[ComponentKind, tuple[str, ...]] = {
    ComponentKind.TITLE: ("Text",),
    ComponentKind.TEXT: ("Text",),
    ComponentKind.BUTTON: ("TouchableOpacity", "Text"),
    ComponentKind.LIST: ("FlatList", "View", "Text"),
    ComponentKind.TEXT_INPUT: ("TextInput",),
    ComponentKind.IMAGE: ("Image",),
    ComponentKind.SCROLL_VIEW: ("ScrollView",),
    ComponentKind.VIEW: ("View",),
    ComponentKind.TOUCHABLE_OPACITY: ("TouchableOpacity",),
    ComponentKind.FLAT_LIST: ("FlatList", "Text"),
    ComponentKind.SAFE_AREA_VIEW: ("SafeAreaView",),
    ComponentKind.UNKNOWN: ("Text",),
}

SCREEN_TEMPLATE = "screen.js.j2"
BODY_LEVEL = 4


def _walk(components: Iterable[AppComponent]) -> Iterable[AppComponent]:
    for component in components:
        yield from component.walk()


def required_primitives(components: Iterable[AppComponent]) -> list[str]:
    """Return the sorted react-native imports a component tree needs.

    Visits every node, nested children included, and always adds the
    primitives used by the screen wrapper.
    """
    needed: set[str] = set(WRAPPER_PRIMITIVES)
    for component in _walk(components):
        needed.update(_PRIMITIVES_BY_KIND.get(component.kind, ()))
    return sorted(needed)


def uses_navigation(components: Iterable[AppComponent]) -> bool:
    """Return ``True`` if any ``Button`` in the tree navigates to a route."""
    return any(
        c.kind is ComponentKind.BUTTON and bool(c.navigate_to)
        for c in _walk(components)
    )


def uses_card(components: Iterable[AppComponent]) -> bool:
    """Return ``True`` if the tree renders the shared ``Card`` component."""
    return any(c.kind is ComponentKind.CARD for c in _walk(components))


def screen_component_name(screen: Screen) -> str:
    """``Home`` -> ``HomeScreen``."""
    return f"{screen.name}Screen"


def screen_module_path(screen: Screen) -> str:
    """Relative module path without extension, e.g. ``screens/HomeScreen``."""
    return f"screens/{screen_component_name(screen)}"


def screen_file_path(screen: Screen) -> str:
    """Relative output file path, e.g. ``screens/HomeScreen.js``."""
    return f"{screen_module_path(screen)}.js"


# ---------------------------------------------------------------------------
# ScreenRenderer
# ---------------------------------------------------------------------------


class ScreenRenderer:
    """Renders one screen of a specification into its module file."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(
        self, screen: Screen, specification: AppSpecification | None = None
    ) -> dict[str, str]:
        """Render *screen* into a ``{path: content}`` mapping.

        Args:
            screen: The screen to render.
            specification: The owning specification. Screen output does not
                currently depend on it; it is accepted so every generator
                step shares the same signature.

        Returns:
            A single-entry mapping from the screen's file path to its source.
        """
        context = self._build_context(screen)
        content = self.renderer.render(SCREEN_TEMPLATE, context)
        return {screen_file_path(screen): content}

    def _build_context(self, screen: Screen) -> dict[str, Any]:
        hooks: list[str] = []
        if screen.state:
            hooks.append("useState")
        if screen.effects:
            hooks.append("useEffect")

        body = "\n".join(
            render_component(component, BODY_LEVEL) for component in screen.components
        )

        return {
            "component_name": screen_component_name(screen),
            "hooks": hooks,
            "primitives": required_primitives(screen.components),
            "uses_navigation": uses_navigation(screen.components),
            "uses_card": uses_card(screen.components),
            "state": [
                {
                    "name": binding.name,
                    "setter": binding.setter,
                    "initial": json.dumps(binding.initial_value, ensure_ascii=False, default=str),
                }
                for binding in screen.state
            ],
            "effects": [
                {"code": effect.code, "dependencies": effect.dependencies}
                for effect in screen.effects
            ],
            "body": body,
        }
