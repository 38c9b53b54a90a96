"""
Data models for the Sandbox Finder.

This module contains all the core data structures used throughout the system.
"""

from .search_request import SearchRequest
from .search_results import FileEntry, SearchResults, SearchStats
from .config import FinderConfig, LimitsConfig, SandboxConfig

__all__ = [
    'SearchRequest',
    'FileEntry',
    'SearchResults',
    'SearchStats',
    'FinderConfig',
    'LimitsConfig',
    'SandboxConfig'
]
