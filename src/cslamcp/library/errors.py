"""Errors raised by the example library."""

from __future__ import annotations

from typing import Dict


class LibraryError(Exception):
    """Base class for failures the caller can report back to a client."""

    code = "LibraryError"

    def to_dict(self) -> Dict[str, str]:
        return {"Error": self.code, "Message": str(self)}


class CorpusUnavailableError(LibraryError):
    code = "PathNotFound"


class ExampleNotFoundError(LibraryError):
    code = "FileNotFound"


class InvalidFileNameError(LibraryError):
    code = "InvalidFileName"


class FetchFailedError(LibraryError):
    code = "FetchFailed"
