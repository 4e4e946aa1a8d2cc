"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

EXAMPLES_PATH_ENV = "CSLA_CODE_SAMPLES_PATH"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-large"
DEFAULT_API_VERSION = "2024-02-01"


def _get_default_examples_path() -> Path:
    """Get the corpus root from the environment, else ./csla-examples."""
    configured = os.environ.get(EXAMPLES_PATH_ENV, "").strip()
    if configured:
        return Path(configured)
    return Path("csla-examples")


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass(slots=True)
class AppConfig:
    examples_path: Path | None = None
    host: str = "127.0.0.1"
    port: int = 8080

    def __post_init__(self) -> None:
        if self.examples_path is None:
            self.examples_path = _get_default_examples_path()

    def resolve_examples_path(self, base_dir: Path | None = None) -> Path:
        if self.examples_path is None:
            self.examples_path = _get_default_examples_path()
        if Path(self.examples_path).is_absolute() or base_dir is None:
            return Path(self.examples_path)
        return base_dir / self.examples_path


@dataclass(slots=True)
class EmbeddingSettings:
    """Connection details for the Azure OpenAI embeddings deployment."""

    endpoint: str | None = None
    api_key: str | None = None
    model: str = DEFAULT_EMBEDDING_MODEL
    api_version: str = DEFAULT_API_VERSION

    @classmethod
    def from_env(cls) -> "EmbeddingSettings":
        return cls(
            endpoint=_env("AZURE_OPENAI_ENDPOINT"),
            api_key=_env("AZURE_OPENAI_API_KEY"),
            model=_env("AZURE_OPENAI_EMBEDDING_MODEL") or DEFAULT_EMBEDDING_MODEL,
            api_version=_env("AZURE_OPENAI_API_VERSION") or DEFAULT_API_VERSION,
        )
