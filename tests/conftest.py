"""Shared pytest fixtures for the appforge test suite.

Provides reusable fixtures for:
- Sample app specifications (flat, nested, stateful, empty)
- A mocked Ollama client for producer tests
- Temporary output directories
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from appforge.ollama_client import LLMResponse, OllamaClient
from appforge.spec.models import AppSpecification


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    output_dir = tmp_path / "generated-app"
    output_dir.mkdir()
    yield output_dir


# ---------------------------------------------------------------------------
# Specifications
# ---------------------------------------------------------------------------

@pytest.fixture
def coffee_spec_dict() -> dict[str, Any]:
    """A two-screen specification in the JSON shape an LLM returns."""
    return {
        "appName": "Coffee Shop App",
        "dependencies": ["lottie", "some-icons"],
        "screens": [
            {
                "name": "Home",
                "path": "index",
                "components": [
                    {"type": "Title", "content": "Welcome to Bean There"},
                    {"type": "Text", "content": "Freshly roasted every morning."},
                    {"type": "Button", "content": "See the menu", "navigateTo": "Menu"},
                ],
            },
            {
                "name": "Menu",
                "path": "menu",
                "components": [
                    {"type": "Title", "content": "Menu"},
                    {"type": "List", "content": ["Espresso", "Flat White", "Cold Brew"]},
                    {"type": "Button", "content": "Order", "onPress": "alert('Ordered!')"},
                ],
            },
        ],
    }


@pytest.fixture
def coffee_spec(coffee_spec_dict: dict[str, Any]) -> AppSpecification:
    return AppSpecification.model_validate(coffee_spec_dict)


@pytest.fixture
def nested_spec() -> AppSpecification:
    """A screen whose leaves sit three containers deep."""
    return AppSpecification.model_validate({
        "appName": "Deep",
        "dependencies": [],
        "screens": [
            {
                "name": "Nested",
                "path": "index",
                "components": [
                    {
                        "type": "SafeAreaView",
                        "children": [
                            {
                                "type": "Card",
                                "children": [
                                    {
                                        "type": "View",
                                        "children": [
                                            {"type": "Text", "content": "deep leaf text"},
                                            {
                                                "type": "Button",
                                                "content": "Go deeper",
                                                "navigateTo": "Details",
                                            },
                                            {"type": "Image", "source": "https://example.com/a.png"},
                                        ],
                                    },
                                ],
                            },
                        ],
                    },
                ],
            },
        ],
    })


@pytest.fixture
def stateful_spec() -> AppSpecification:
    """A screen declaring local state and effects."""
    return AppSpecification.model_validate({
        "appName": "Counter",
        "dependencies": [],
        "screens": [
            {
                "name": "Counter",
                "path": "index",
                "state": [
                    {"name": "count", "initialValue": 0, "type": "number"},
                    {"name": "label", "initialValue": "hi", "type": "string"},
                ],
                "effects": [
                    {"dependencies": ["count"], "code": "console.log(count);"},
                ],
                "components": [
                    {"type": "Text", "content": "Count"},
                    {
                        "type": "TextInput",
                        "placeholder": "Label",
                        "value": "label",
                        "onChangeText": "setLabel",
                    },
                ],
            },
        ],
    })


@pytest.fixture
def empty_spec() -> AppSpecification:
    return AppSpecification(app_name="Empty", dependencies=[], screens=[])


# ---------------------------------------------------------------------------
# Mock Ollama
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_ollama(coffee_spec_dict: dict[str, Any]) -> OllamaClient:
    """An ``OllamaClient`` whose network calls are replaced by ``AsyncMock``.

    By default the server is up, the model is present, and generation
    returns the coffee shop specification.
    """
    client = OllamaClient()
    client.is_available = AsyncMock(return_value=True)
    client.ensure_model = AsyncMock(return_value=True)
    client.generate_with_fallback = AsyncMock(
        return_value=LLMResponse(
            text=json.dumps(coffee_spec_dict),
            model="qwen2.5-coder:14b",
            success=True,
        )
    )
    return client
