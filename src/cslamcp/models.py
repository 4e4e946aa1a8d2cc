"""Core data models and their wire shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(slots=True)
class WordMatch:
    """Occurrences of one search word within one example file."""

    word: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"Word": self.word, "Count": self.count}


@dataclass(slots=True)
class SearchResult:
    """Keyword score of a single example file."""

    score: int
    file_name: str
    matching_words: List[WordMatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Score": self.score,
            "FileName": self.file_name,
            "MatchingWords": [match.to_dict() for match in self.matching_words],
        }


@dataclass(slots=True)
class DocumentEmbedding:
    """Example file content paired with its embedding vector.

    ``version`` is the CSLA major version taken from a ``v<N>/`` folder, or
    ``None`` when the example applies to every version.
    """

    file_name: str
    content: str
    embedding: List[float]
    version: int | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "FileName": self.file_name,
            "Content": self.content,
            "Embedding": self.embedding,
            "Version": self.version,
        }
