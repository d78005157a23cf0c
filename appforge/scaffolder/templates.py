"""Jinja2 template rendering for generated project files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``appforge/scaffolder/templates/`` directory and renders them to strings.
Rendering never writes anything: the generator collects the results into an
in-memory ``{path: content}`` mapping and leaves persistence to the caller.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for the generated React Native project.

    Templates are ``.j2`` files under a configurable template directory. The
    environment is configured once in ``__init__`` and only read afterwards,
    so a single renderer can be shared between concurrent generations.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["js_string"] = js_string_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"App.js.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def js_string_filter(value: Any) -> str:
    """Quote a value as a JavaScript string literal."""
    return json.dumps(str(value), ensure_ascii=False)


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------

def slugify(value: str) -> str:
    """Lowercase *value* and collapse whitespace runs into single hyphens.

    ``"Coffee Shop App"`` -> ``"coffee-shop-app"``.
    """
    return re.sub(r"\s+", "-", value.strip().lower())
