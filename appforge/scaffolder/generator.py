"""Main generation orchestrator.

Takes an ``AppSpecification`` and assembles the complete file set of an
Expo / React Navigation app skeleton:

- ``App.js`` navigation root registering every screen on a stack navigator
- ``screens/<Name>Screen.js`` for every screen, in specification order
- ``components/Card.js`` when any screen uses a ``Card``
- ``package.json``, ``app.json`` and ``babel.config.js``

Generation is synchronous and deterministic and returns an in-memory
``{relative_path: content}`` mapping; writing it anywhere is up to the caller.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from appforge.spec.models import AppSpecification, ComponentKind

from .screens import ScreenRenderer, screen_component_name, screen_module_path
from .templates import TemplateRenderer, slugify


# ---------------------------------------------------------------------------
# Output layout
# ---------------------------------------------------------------------------

NAVIGATION_ROOT = "App.js"
PACKAGE_MANIFEST = "package.json"
APP_MANIFEST = "app.json"
BABEL_CONFIG = "babel.config.js"
CARD_COMPONENT = "components/Card.js"

# Files emitted for every specification, screens aside.
FIXED_FILES: tuple[str, ...] = (NAVIGATION_ROOT, PACKAGE_MANIFEST, APP_MANIFEST, BABEL_CONFIG)

APP_VERSION = "1.0.0"

# Placeholder version for dependencies requested by the specification.
DEPENDENCY_VERSION_MARKER = "latest"

BASELINE_DEPENDENCIES: dict[str, str] = {
    "expo": "~50.0.0",
    "react-native": "0.73.0",
    "react": "18.2.0",
    "@react-navigation/native": "^6.1.0",
    "@react-navigation/stack": "^6.3.0",
    "react-native-screens": "~3.29.0",
    "react-native-safe-area-context": "4.8.2",
}

DEV_DEPENDENCIES: dict[str, str] = {
    "@babel/core": "^7.20.0",
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Project assembly orchestrator.

    A generator holds only a read-only template environment, so one instance
    can serve any number of concurrent ``generate`` calls.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.screen_renderer = ScreenRenderer(self.renderer)

    # -- Public API --------------------------------------------------------

    def generate(self, specification: AppSpecification) -> dict[str, str]:
        """Generate every project file for *specification*.

        Args:
            specification: The app to generate. It is never mutated.

        Returns:
            A new mapping from relative file path to file content. Keys are
            inserted in a fixed order: navigation root, screens in
            specification order, shared components, then manifests.
        """
        files: dict[str, str] = {
            NAVIGATION_ROOT: self._render_navigation_root(specification),
        }

        for screen in specification.screens:
            files.update(self.screen_renderer.render(screen, specification))

        files.update(self._render_shared_components(specification))

        files[PACKAGE_MANIFEST] = render_package_json(specification)
        files[APP_MANIFEST] = render_app_json(specification)
        files[BABEL_CONFIG] = self.renderer.render("babel.config.js.j2", {})
        return files

    # -- Navigation root ---------------------------------------------------

    def _render_navigation_root(self, specification: AppSpecification) -> str:
        """Render ``App.js``; the first screen is the initial route."""
        screens = [
            {
                "name": screen.name,
                "component": screen_component_name(screen),
                "module": screen_module_path(screen),
            }
            for screen in specification.screens
        ]
        context: dict[str, Any] = {
            "screens": screens,
            "initial_route": screens[0]["name"] if screens else None,
        }
        return self.renderer.render("App.js.j2", context)

    # -- Shared components -------------------------------------------------

    def _render_shared_components(self, specification: AppSpecification) -> dict[str, str]:
        """Extract reusable components used anywhere in the app."""
        files: dict[str, str] = {}
        if uses_kind(specification, ComponentKind.CARD):
            files[CARD_COMPONENT] = self.renderer.render("Card.js.j2", {})
        return files


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

def merge_dependencies(requested: list[str]) -> dict[str, str]:
    """Union of the baseline framework set and *requested* packages.

    Baseline entries keep their pinned versions; every other requested
    package gets :data:`DEPENDENCY_VERSION_MARKER`. Duplicates collapse and
    first-seen order is kept.
    """
    merged = dict(BASELINE_DEPENDENCIES)
    for name in requested:
        name = name.strip()
        if name and name not in merged:
            merged[name] = DEPENDENCY_VERSION_MARKER
    return merged


def render_package_json(specification: AppSpecification) -> str:
    """Render the npm dependency manifest."""
    package = {
        "name": slugify(specification.app_name),
        "version": APP_VERSION,
        "main": "node_modules/expo/AppEntry.js",
        "scripts": {
            "start": "expo start",
            "android": "expo start --android",
            "ios": "expo start --ios",
            "web": "expo start --web",
        },
        "dependencies": merge_dependencies(specification.dependencies),
        "devDependencies": dict(DEV_DEPENDENCIES),
        "private": True,
    }
    return json.dumps(package, indent=2, ensure_ascii=False) + "\n"


def render_app_json(specification: AppSpecification) -> str:
    """Render the Expo application manifest."""
    manifest = {
        "expo": {
            "name": specification.app_name,
            "slug": slugify(specification.app_name),
            "version": APP_VERSION,
            "orientation": "portrait",
            "icon": "./assets/icon.png",
            "userInterfaceStyle": "light",
            "splash": {
                "image": "./assets/splash.png",
                "resizeMode": "contain",
                "backgroundColor": "#ffffff",
            },
            "assetBundlePatterns": ["**/*"],
            "ios": {"supportsTablet": True},
            "android": {
                "adaptiveIcon": {
                    "foregroundImage": "./assets/adaptive-icon.png",
                    "backgroundColor": "#FFFFFF",
                },
            },
            "web": {"favicon": "./assets/favicon.png"},
        },
    }
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def uses_kind(specification: AppSpecification, kind: ComponentKind) -> bool:
    """Return ``True`` if any component of any screen, at any depth, is *kind*."""
    return any(
        component.kind is kind
        for screen in specification.screens
        for component in screen.walk()
    )


@lru_cache(maxsize=1)
def _default_generator() -> ProjectGenerator:
    return ProjectGenerator()


def generate(specification: AppSpecification) -> dict[str, str]:
    """Generate the project files for *specification* with the default templates."""
    return _default_generator().generate(specification)
