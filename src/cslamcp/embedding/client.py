"""Client for the Azure OpenAI embeddings REST API."""

from __future__ import annotations

import logging
from types import TracebackType

import httpx
import numpy as np

from cslamcp.config import EmbeddingSettings

logger = logging.getLogger(__name__)


class EmbeddingError(Exception):
    """Raised when the embedding service does not return a usable vector."""


class AzureEmbeddingClient:
    """Thin wrapper around the deployment's ``/embeddings`` endpoint."""

    def __init__(
        self,
        settings: EmbeddingSettings,
        *,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        if not settings.endpoint:
            raise ValueError("Azure OpenAI endpoint is not configured")
        if not settings.api_key:
            raise ValueError("Azure OpenAI API key is not configured")
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def url(self) -> str:
        base = self.settings.endpoint.rstrip("/")  # type: ignore[union-attr]
        return f"{base}/openai/deployments/{self.settings.model}/embeddings"

    def embed(self, text: str) -> np.ndarray:
        """Return the float32 embedding of ``text``."""
        try:
            response = self._client.post(
                self.url,
                params={"api-version": self.settings.api_version},
                headers={"api-key": self.settings.api_key or ""},
                json={"input": text},
            )
        except httpx.TimeoutException as exc:
            raise EmbeddingError("Embedding API request timed out") from exc
        except httpx.RequestError as exc:
            raise EmbeddingError(f"Network error calling embedding API: {exc}") from exc

        if response.status_code == 404:
            raise EmbeddingError(
                f"Azure OpenAI deployment '{self.settings.model}' not found (404)"
            )
        if response.status_code == 401:
            raise EmbeddingError("Authentication failed (401), check AZURE_OPENAI_API_KEY")
        if response.status_code != 200:
            raise EmbeddingError(
                f"Embedding API returned {response.status_code}: {response.text}"
            )

        try:
            vector = response.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise EmbeddingError("No embedding data in API response") from exc

        embedding = np.asarray(vector, dtype="float32")
        logger.debug("Generated embedding with %d dimensions", embedding.shape[0])
        return embedding

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AzureEmbeddingClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
