"""Batch embedding of the example corpus."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np

from cslamcp.models import DocumentEmbedding
from cslamcp.utils.files import detect_version, iter_example_paths, relative_example_name

LOGGER = logging.getLogger(__name__)

PROGRESS_EVERY = 5


class Embedder(Protocol):
    def embed(self, text: str) -> np.ndarray: ...


@dataclass(slots=True)
class GenerationStats:
    processed: int = 0
    failed: int = 0
    failed_files: list[str] = field(default_factory=list)

    def fail(self, name: str) -> None:
        self.failed += 1
        self.failed_files.append(name)


class EmbeddingsGenerator:
    """Embeds every code sample and guide, one file at a time."""

    def __init__(self, embedder: Embedder) -> None:
        self.embedder = embedder
        self.stats = GenerationStats()

    def generate(self, examples_path: Path) -> list[DocumentEmbedding]:
        examples_path = Path(examples_path)
        files = list(iter_example_paths(examples_path))
        LOGGER.info("Found %d files to process", len(files))

        self.stats = GenerationStats()
        records: list[DocumentEmbedding] = []
        for path in files:
            name = relative_example_name(examples_path, path)
            version = detect_version(name)
            LOGGER.info(
                "Processing: %s (%s)", name, f"v{version}" if version is not None else "common"
            )
            try:
                content = path.read_text(encoding="utf-8")
                vector = self.embedder.embed(content)
            except Exception as exc:
                LOGGER.error("Error processing file %s: %s", name, exc)
                self.stats.fail(name)
                continue

            if vector.size == 0:
                LOGGER.warning("Failed to generate embedding for %s", name)
                self.stats.fail(name)
                continue

            records.append(
                DocumentEmbedding(
                    file_name=name,
                    content=content,
                    embedding=vector.astype("float32", copy=False).tolist(),
                    version=version,
                )
            )
            self.stats.processed += 1
            if self.stats.processed % PROGRESS_EVERY == 0:
                LOGGER.info("Processed %d/%d files...", self.stats.processed, len(files))

        LOGGER.info("Successfully processed %d files", self.stats.processed)
        return records


def write_embeddings(records: Sequence[DocumentEmbedding], output: Path) -> None:
    """Serialize records as an indented JSON array."""
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    payload = [record.to_dict() for record in records]
    output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
