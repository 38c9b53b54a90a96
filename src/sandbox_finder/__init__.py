"""
Sandbox Finder - Core Package

Sandboxed recursive file search: finds entries whose names match a query,
restricted to the user's standard directories and a few shared ones, and
returns them ranked by relevance.
"""

from .errors import (
    SearchError,
    SearchErrorKind,
    InvalidPathError,
    PathNotAllowedError,
    DirectoryReadError,
    EntryReadError
)
from .models.search_results import FileEntry
from .search import SearchOrchestrator, search

__version__ = "0.1.0"
__author__ = "Sandbox Finder Team"

__all__ = [
    'search',
    'SearchOrchestrator',
    'FileEntry',
    'SearchError',
    'SearchErrorKind',
    'InvalidPathError',
    'PathNotAllowedError',
    'DirectoryReadError',
    'EntryReadError'
]
