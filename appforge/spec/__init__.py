"""App specification schema.

The specification is the contract between whatever produces an app
description (an LLM, a hand-written JSON file, an amended earlier version)
and the code generator.

Usage::

    from appforge.spec import load_specification

    spec = load_specification("coffee-shop.json")
    print(spec.app_name, [s.name for s in spec.screens])
"""

from appforge.spec.models import (
    AppComponent,
    AppSpecification,
    ComponentKind,
    Effect,
    ListContent,
    Screen,
    StateBinding,
    TextContent,
    load_specification,
    parse_specification,
)

__all__ = [
    "AppComponent",
    "AppSpecification",
    "ComponentKind",
    "Effect",
    "ListContent",
    "Screen",
    "StateBinding",
    "TextContent",
    "load_specification",
    "parse_specification",
]
