"""appforge configuration.

Centralised, typed configuration for the CLI and the specification producer.
All settings use Pydantic v2 models so they can be validated at construction
time and serialised to/from JSON or environment variables without
boiler-plate. The code generator itself takes no configuration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """Configuration for the Ollama server that produces app specifications."""

    url: str = Field(default="http://localhost:11434")
    model: str = Field(default="qwen2.5-coder:14b")
    fallback_model: str = Field(default="llama3.1:8b")
    timeout: int = Field(default=120, ge=10, description="Per-request timeout in seconds")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_k: int = Field(default=40, ge=1)
    top_p: float = Field(default=0.95, gt=0.0, le=1.0)

    def sampling_options(self) -> dict[str, Any]:
        """Return the ``options`` block sent with every generation request."""
        return {
            "temperature": self.temperature,
            "top_k": self.top_k,
            "top_p": self.top_p,
        }


class Config(BaseModel):
    """Global appforge configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the producer and the file writer.
    """

    output_dir: Path = Field(default=Path("./output"))
    spec_filename: str = Field(default="appforge-spec.json")
    write_spec: bool = Field(
        default=True, description="Save the specification next to the generated files"
    )
    llm: LLMConfig = Field(default_factory=LLMConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def spec_path(self) -> Path:
        """Where the specification used for a generation is saved."""
        return self.output_dir / self.spec_filename

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration file written as JSON; omitted keys keep their defaults."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            APPFORGE_OUTPUT_DIR, APPFORGE_LLM_URL, APPFORGE_LLM_MODEL,
            APPFORGE_LLM_FALLBACK_MODEL, APPFORGE_LLM_TIMEOUT,
            APPFORGE_LLM_TEMPERATURE.
        """
        llm_kwargs: dict[str, Any] = {}
        if os.environ.get("APPFORGE_LLM_URL"):
            llm_kwargs["url"] = os.environ["APPFORGE_LLM_URL"]
        if os.environ.get("APPFORGE_LLM_MODEL"):
            llm_kwargs["model"] = os.environ["APPFORGE_LLM_MODEL"]
        if os.environ.get("APPFORGE_LLM_FALLBACK_MODEL"):
            llm_kwargs["fallback_model"] = os.environ["APPFORGE_LLM_FALLBACK_MODEL"]
        if os.environ.get("APPFORGE_LLM_TIMEOUT"):
            llm_kwargs["timeout"] = int(os.environ["APPFORGE_LLM_TIMEOUT"])
        if os.environ.get("APPFORGE_LLM_TEMPERATURE"):
            llm_kwargs["temperature"] = float(os.environ["APPFORGE_LLM_TEMPERATURE"])

        return cls(
            output_dir=Path(os.environ.get("APPFORGE_OUTPUT_DIR", "./output")),
            llm=LLMConfig(**llm_kwargs),
        )
