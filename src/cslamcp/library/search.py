"""Keyword search and direct fetch over the example corpus."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from cslamcp.library.errors import (
    CorpusUnavailableError,
    ExampleNotFoundError,
    FetchFailedError,
    InvalidFileNameError,
)
from cslamcp.models import SearchResult, WordMatch
from cslamcp.utils.files import iter_example_paths
from cslamcp.utils.text import count_occurrences, extract_search_words

LOGGER = logging.getLogger(__name__)


class ExampleLibrary:
    """Read-only view of the code samples stored under ``root``.

    Every call rescans the directory, so edits on disk are visible immediately
    and no state is shared between concurrent calls.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _ensure_root(self) -> None:
        if not self.root.is_dir():
            raise CorpusUnavailableError(f"Code samples path does not exist: {self.root}")
        try:
            with os.scandir(self.root) as entries:
                next(entries, None)
        except OSError as exc:
            raise CorpusUnavailableError(
                f"Code samples path is not readable: {self.root}: {exc}"
            ) from exc

    def search(self, query: str) -> List[SearchResult]:
        """Rank example files by how often they mention the query words."""
        self._ensure_root()

        words = extract_search_words(query)
        if not words:
            return []

        results: List[SearchResult] = []
        for path in iter_example_paths(self.root):
            try:
                content = path.read_text(encoding="utf-8").lower()
            except (OSError, UnicodeDecodeError) as exc:
                LOGGER.warning("Error reading file %s: %s", path, exc)
                continue

            matches = []
            for word in words:
                count = count_occurrences(content, word, folded=True)
                if count > 0:
                    matches.append(WordMatch(word=word, count=count))

            score = sum(match.count for match in matches)
            if score > 0:
                results.append(
                    SearchResult(score=score, file_name=path.name, matching_words=matches)
                )

        results.sort(key=lambda result: (-result.score, result.file_name))
        LOGGER.debug("Query %r matched %d files", query, len(results))
        return results

    def fetch(self, file_name: str) -> str:
        """Return the content of ``root/file_name``."""
        if not file_name or not file_name.strip():
            raise InvalidFileNameError("File name cannot be empty or null")
        if ".." in file_name or Path(file_name).is_absolute():
            raise InvalidFileNameError(
                f"Invalid file name: {file_name}. Only relative file names are allowed."
            )
        self._ensure_root()

        path = self.root / file_name
        if not path.is_file():
            raise ExampleNotFoundError(
                f"File '{file_name}' not found in code samples directory"
            )
        try:
            with path.open(encoding="utf-8", newline="") as handle:
                return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.error("Error reading file %s: %s", path, exc)
            raise FetchFailedError(f"Fetch operation failed: {exc}") from exc
