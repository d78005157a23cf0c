"""Ollama HTTP client used by the specification producer.

Only the endpoints appforge needs are wrapped: ``/api/generate`` for
schema-constrained completions, ``/api/tags`` for health checks and model
discovery, and ``/api/pull`` for fetching a missing model. Completion
failures are reported in the returned :class:`LLMResponse` instead of being
raised, so the caller decides whether another model is worth asking.

Typical usage::

    client = OllamaClient("http://localhost:11434")
    if await client.ensure_model("qwen2.5-coder:14b"):
        resp = await client.generate("A todo app", format=APP_SPEC_SCHEMA)
"""

from __future__ import annotations

from typing import Any, Union

import httpx
from pydantic import BaseModel, Field

DEFAULT_MODEL = "qwen2.5-coder:14b"
CONNECT_TIMEOUT = 10.0
PULL_TIMEOUT = 1800.0

# ``"json"`` or a JSON schema the completion must follow.
OutputFormat = Union[str, dict[str, Any]]


class LLMResponse(BaseModel):
    """Outcome of one completion request."""

    text: str = Field(default="", description="Raw completion text")
    model: str = Field(default="", description="Model tag that answered, or was asked")
    duration_ms: float = Field(default=0.0, description="Ollama's total_duration, in ms")
    success: bool = Field(default=True)
    error: str | None = Field(default=None, description="Readable failure reason")


def describe_failure(exc: Exception, base_url: str, timeout: float) -> str:
    """Turn a failed completion request into a message fit for the CLI."""
    if isinstance(exc, httpx.ConnectError):
        return f"Cannot connect to Ollama at {base_url}. Is the server running?"
    if isinstance(exc, httpx.TimeoutException):
        return f"Request to Ollama timed out after {timeout}s."
    if isinstance(exc, httpx.HTTPStatusError):
        return f"Ollama returned HTTP {exc.response.status_code}: {exc.response.text[:500]}"
    return f"Unexpected error during Ollama generate: {exc}"


def build_generate_payload(
    prompt: str,
    model: str,
    system: str = "",
    format: OutputFormat | None = None,
    options: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble a non-streaming ``/api/generate`` body, omitting unset fields."""
    payload: dict[str, Any] = {"model": model, "prompt": prompt, "stream": False}
    if system:
        payload["system"] = system
    if format is not None:
        payload["format"] = format
    if options:
        payload["options"] = options
    return payload


class OllamaClient:
    """Async Ollama client.

    Every call opens its own ``httpx.AsyncClient``, so an instance holds no
    connection and can be shared freely.
    """

    def __init__(self, base_url: str = "http://localhost:11434", timeout: int = 120) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # -- Transport ---------------------------------------------------------

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout or self.timeout, connect=CONNECT_TIMEOUT),
        )

    async def _get_json(self, path: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.get(path)
            response.raise_for_status()
            return response.json()

    async def _post_json(
        self, path: str, body: dict[str, Any], timeout: float | None = None
    ) -> dict[str, Any]:
        async with self._client(timeout) as client:
            response = await client.post(path, json=body)
            response.raise_for_status()
            return response.json()

    # -- Completions -------------------------------------------------------

    async def generate(
        self,
        prompt: str,
        model: str = DEFAULT_MODEL,
        system: str = "",
        format: OutputFormat | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Request one completion from *model*.

        Args:
            prompt: The user prompt.
            model: Ollama model tag.
            system: System instruction, sent only when non-empty.
            format: ``"json"`` or a JSON schema constraining the output.
            options: Sampling options such as ``temperature``.
        """
        payload = build_generate_payload(prompt, model, system, format, options)
        try:
            data = await self._post_json("/api/generate", payload)
        except Exception as exc:  # noqa: BLE001
            return LLMResponse(
                model=model,
                success=False,
                error=describe_failure(exc, self.base_url, self.timeout),
            )
        return LLMResponse(
            text=data.get("response", ""),
            model=data.get("model", model),
            duration_ms=data.get("total_duration", 0) / 1_000_000,
        )

    async def generate_with_fallback(
        self,
        prompt: str,
        primary_model: str,
        fallback_model: str,
        system: str = "",
        format: OutputFormat | None = None,
        options: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Ask *primary_model*; if that fails, ask *fallback_model* once."""
        models = [primary_model]
        if fallback_model != primary_model:
            models.append(fallback_model)
        for model in models:
            result = await self.generate(
                prompt, model=model, system=system, format=format, options=options
            )
            if result.success:
                break
        return result

    # -- Server & models ---------------------------------------------------

    async def is_available(self) -> bool:
        """``True`` when ``/api/tags`` answers successfully."""
        try:
            await self._get_json("/api/tags")
        except (httpx.HTTPError, ValueError):
            return False
        return True

    async def list_models(self) -> list[str]:
        """Sorted tags of the locally pulled models; empty when unreachable."""
        try:
            data = await self._get_json("/api/tags")
        except (httpx.HTTPError, ValueError):
            return []
        return sorted(entry["name"] for entry in data.get("models", []) if entry.get("name"))

    async def has_model(self, model: str) -> bool:
        """Whether *model* is pulled; a bare name also matches its ``:latest`` tag."""
        available = await self.list_models()
        return model in available or f"{model}:latest" in available

    async def pull_model(self, model: str) -> bool:
        """Download *model*, waiting up to :data:`PULL_TIMEOUT` seconds."""
        try:
            data = await self._post_json(
                "/api/pull", {"name": model, "stream": False}, timeout=PULL_TIMEOUT
            )
        except (httpx.HTTPError, ValueError):
            return False
        return data.get("status") == "success"

    async def ensure_model(self, model: str) -> bool:
        """Make *model* available locally, pulling it when missing."""
        if await self.has_model(model):
            return True
        return await self.pull_model(model)
