"""App specification producer.

Turns a natural-language app description into an ``AppSpecification`` by
asking a local LLM (through :class:`~appforge.ollama_client.OllamaClient`)
for schema-constrained JSON, and derives amended specifications from a
previous one plus a modification request.

The producer has an explicit lifecycle: nothing is contacted at import or
construction time. ``start()`` checks the server and model, after which the
producer is ready until ``close()``::

    async with SpecProducer(config.llm) as producer:
        spec = await producer.create("A coffee shop app with a menu screen")
        spec = await producer.iterate(spec, "Add an order history screen")

Every failure of a generation attempt (unreachable server, empty output,
non-JSON output, schema mismatch) is terminal for that attempt and raised as
:class:`SpecProducerError` with a message fit for the end user.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import ValidationError

from appforge.config import LLMConfig
from appforge.ollama_client import OllamaClient
from appforge.spec.models import AppSpecification


# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

PROMPT_MIN_LENGTH = 10
PROMPT_MAX_LENGTH = 5000
MODIFICATION_MIN_LENGTH = 5
MODIFICATION_MAX_LENGTH = 2000


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

SYSTEM_INSTRUCTION = """\
You are an AI assistant that generates React Native app specifications based on user prompts.

IMPORTANT: You must respond with valid JSON that matches the exact schema provided. Do not include any explanations or additional text.

Supported component types and their properties:
1. Title: { type: "Title", content: string, style?: object }
2. Text: { type: "Text", content: string, style?: object }
3. Button: { type: "Button", content: string, navigateTo?: string, onPress?: string, style?: object }
4. List: { type: "List", content: string[], style?: object }
5. TextInput: { type: "TextInput", placeholder: string, value?: string, onChangeText?: string, style?: object }
6. Image: { type: "Image", source: string, alt?: string, style?: object }
7. Card: { type: "Card", children: AppComponent[], style?: object }
8. ScrollView: { type: "ScrollView", children: AppComponent[], style?: object }
9. View: { type: "View", children: AppComponent[], style?: object }
10. TouchableOpacity: { type: "TouchableOpacity", children: AppComponent[], onPress?: string, style?: object }
11. FlatList: { type: "FlatList", data: any[], renderItem: string, keyExtractor?: string, style?: object }
12. SafeAreaView: { type: "SafeAreaView", children: AppComponent[], style?: object }

Each screen has a PascalCase 'name' and a kebab-case 'path'. The first screen is the initial screen.
For navigation, set navigateTo to the destination screen's name.
For interactivity, declare screen state (name, initialValue, type) and effects (dependencies, code);
state setters are named set<Name>, e.g. count -> setCount.
"""

APP_SPEC_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "appName": {"type": "string"},
        "dependencies": {"type": "array", "items": {"type": "string"}},
        "screens": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "path": {"type": "string"},
                    "components": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "type": {"type": "string"},
                                "content": {
                                    "oneOf": [
                                        {"type": "string"},
                                        {"type": "array", "items": {"type": "string"}},
                                    ]
                                },
                                "navigateTo": {"type": "string"},
                                "onPress": {"type": "string"},
                                "placeholder": {"type": "string"},
                                "value": {"type": "string"},
                                "onChangeText": {"type": "string"},
                                "source": {"type": "string"},
                                "alt": {"type": "string"},
                                "children": {"type": "array"},
                                "data": {"type": "array"},
                                "renderItem": {"type": "string"},
                                "keyExtractor": {"type": "string"},
                                "style": {"type": "object"},
                            },
                            "required": ["type"],
                        },
                    },
                    "state": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "name": {"type": "string"},
                                "initialValue": {},
                                "type": {"type": "string"},
                            },
                        },
                    },
                    "effects": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "dependencies": {"type": "array", "items": {"type": "string"}},
                                "code": {"type": "string"},
                            },
                        },
                    },
                },
                "required": ["name", "path", "components"],
            },
        },
    },
    "required": ["appName", "dependencies", "screens"],
}


def build_iteration_prompt(original: AppSpecification, modification_prompt: str) -> str:
    """Build the prompt that asks for an amended specification."""
    return (
        "Original App Specification:\n"
        f"{original.to_json(indent=2)}\n"
        "\n"
        "Modification Request:\n"
        f"{modification_prompt}\n"
        "\n"
        "Please modify the app specification according to the request above. "
        "Maintain the existing structure and only change what's necessary.\n"
    )


# ---------------------------------------------------------------------------
# Exceptions & state
# ---------------------------------------------------------------------------


class SpecProducerError(Exception):
    """Raised when a specification cannot be produced."""


class ProducerState(str, Enum):
    """Lifecycle of a :class:`SpecProducer`."""
    CREATED = "created"
    READY = "ready"
    CLOSED = "closed"


# ---------------------------------------------------------------------------
# Completion decoding
# ---------------------------------------------------------------------------


def decode_completion(text: str) -> AppSpecification:
    """Validate raw LLM output and decode it into an ``AppSpecification``.

    Raises:
        SpecProducerError: If the output is empty, is not a single JSON
            object, cannot be decoded, or does not match the schema.
    """
    stripped = text.strip()
    if not stripped:
        raise SpecProducerError(
            "Received an empty response from the AI. Please try refining your prompt."
        )
    if not (stripped.startswith("{") and stripped.endswith("}")):
        raise SpecProducerError("AI did not return a JSON object. Please try again.")
    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as exc:
        raise SpecProducerError(f"AI returned invalid JSON: {exc.msg}. Please try again.") from exc
    try:
        return AppSpecification.model_validate(data)
    except ValidationError as exc:
        raise SpecProducerError(
            f"AI response did not match the app specification schema "
            f"({exc.error_count()} error(s)): {exc.errors()[0]['msg']}"
        ) from exc


def _check_length(label: str, value: str, minimum: int, maximum: int) -> str:
    value = value.strip()
    if len(value) < minimum:
        raise SpecProducerError(f"{label} must be at least {minimum} characters long.")
    if len(value) > maximum:
        raise SpecProducerError(f"{label} must be at most {maximum} characters long.")
    return value


# ---------------------------------------------------------------------------
# SpecProducer
# ---------------------------------------------------------------------------


class SpecProducer:
    """Produces app specifications from natural-language requests.

    Attributes:
        config: Model, endpoint and sampling settings.
        client: The Ollama client used for every request.
        state: Current lifecycle state.
    """

    def __init__(self, config: LLMConfig, client: OllamaClient | None = None) -> None:
        self.config = config
        self.client = client or OllamaClient(base_url=config.url, timeout=config.timeout)
        self.state = ProducerState.CREATED

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self.state is ProducerState.READY

    async def start(self) -> None:
        """Check that the LLM server is reachable and the model is present.

        Raises:
            SpecProducerError: If the server is down or no usable model can
                be made available.
        """
        if self.state is ProducerState.CLOSED:
            raise SpecProducerError("Producer has been closed and cannot be restarted.")
        if self.ready:
            return
        if not await self.client.is_available():
            raise SpecProducerError(
                f"Cannot reach the AI service at {self.client.base_url}. Is Ollama running?"
            )
        if not await self.client.ensure_model(self.config.model):
            if not await self.client.ensure_model(self.config.fallback_model):
                raise SpecProducerError(
                    f"Neither model {self.config.model!r} nor fallback "
                    f"{self.config.fallback_model!r} is available."
                )
        self.state = ProducerState.READY

    async def close(self) -> None:
        """Mark the producer closed; later requests fail."""
        self.state = ProducerState.CLOSED

    async def __aenter__(self) -> "SpecProducer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def create(self, prompt: str) -> AppSpecification:
        """Produce a new specification from an app description."""
        prompt = _check_length("Prompt", prompt, PROMPT_MIN_LENGTH, PROMPT_MAX_LENGTH)
        return await self._complete(prompt)

    async def iterate(
        self, original: AppSpecification, modification_prompt: str
    ) -> AppSpecification:
        """Produce an amended copy of *original*; *original* is left untouched."""
        modification_prompt = _check_length(
            "Modification request",
            modification_prompt,
            MODIFICATION_MIN_LENGTH,
            MODIFICATION_MAX_LENGTH,
        )
        return await self._complete(build_iteration_prompt(original, modification_prompt))

    async def _complete(self, prompt: str) -> AppSpecification:
        if not self.ready:
            raise SpecProducerError(
                f"Producer is {self.state.value}; call start() before generating."
            )
        response = await self.client.generate_with_fallback(
            prompt,
            primary_model=self.config.model,
            fallback_model=self.config.fallback_model,
            system=SYSTEM_INSTRUCTION,
            format=APP_SPEC_SCHEMA,
            options=self.config.sampling_options(),
        )
        if not response.success:
            raise SpecProducerError(
                f"Failed to communicate with the AI service: {response.error}"
            )
        return decode_completion(response.text)
