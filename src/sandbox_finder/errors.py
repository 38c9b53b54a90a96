"""
Error types for the Sandbox Finder.

Every failure a search can report to its caller is a subclass of SearchError.
Each carries a SearchErrorKind so the host shell can map it to its own
user-facing representation without matching on exception classes.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class SearchErrorKind(Enum):
    """Enumeration of the error kinds a search can report."""
    INVALID_PATH = "InvalidPath"
    PATH_NOT_ALLOWED = "PathNotAllowed"
    DIRECTORY_READ_ERROR = "DirectoryReadError"
    ENTRY_READ_ERROR = "EntryReadError"


class SearchError(Exception):
    """
    Base class for errors returned by a search.

    Attributes:
        kind: Machine-readable error kind
        path: The path the error refers to (if any)
    """

    kind: SearchErrorKind

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for the calling shell."""
        return {
            'kind': self.kind.value,
            'message': self.message,
            'path': self.path
        }


class InvalidPathError(SearchError):
    """Raised when the search root is missing, not a directory, or cannot be canonicalized."""
    kind = SearchErrorKind.INVALID_PATH


class PathNotAllowedError(SearchError):
    """Raised when the canonical search root lies outside every allowed directory."""
    kind = SearchErrorKind.PATH_NOT_ALLOWED


class DirectoryReadError(SearchError):
    """Raised when the search root itself cannot be listed."""
    kind = SearchErrorKind.DIRECTORY_READ_ERROR


class EntryReadError(SearchError):
    """Raised when metadata for a matched entry directly under the root cannot be read."""
    kind = SearchErrorKind.ENTRY_READ_ERROR
