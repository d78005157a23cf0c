"""appforge -- AI-assisted React Native app scaffolding.

A natural-language description becomes an ``AppSpecification`` (via an LLM,
see :mod:`appforge.producer`), and :func:`generate` turns a specification
into the files of an app skeleton.
"""

from appforge.scaffolder.generator import generate
from appforge.spec.models import AppSpecification

__all__ = ["AppSpecification", "generate"]

__version__ = "0.1.0"
