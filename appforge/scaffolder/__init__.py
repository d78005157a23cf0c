"""appforge scaffolder -- renders app specifications into source trees.

Takes an ``AppSpecification`` and produces the files of an Expo app using
React Navigation's stack navigator: the ``App.js`` navigation root, one
module per screen, shared components, and the project manifests.

Quick usage::

    from appforge.scaffolder import ProjectGenerator
    from appforge.spec import load_specification

    files = ProjectGenerator().generate(load_specification("spec.json"))
    for path, content in files.items():
        print(path, len(content))
"""

from appforge.scaffolder.components import render_component
from appforge.scaffolder.generator import ProjectGenerator, generate
from appforge.scaffolder.screens import ScreenRenderer
from appforge.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectGenerator",
    "ScreenRenderer",
    "TemplateRenderer",
    "generate",
    "render_component",
]
