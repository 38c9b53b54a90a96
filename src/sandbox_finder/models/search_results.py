"""
Search results data models for the Sandbox Finder.

This module defines the data structures produced by a search: the immutable
FileEntry values returned to the caller, per-walk statistics, and the
SearchResults envelope that bundles them with timing information.
"""

from typing import Dict, List, Optional, Any
from datetime import datetime, timezone
from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Largest value an unsigned 64-bit field can hold
U64_MAX = 2 ** 64 - 1


class FileEntry(BaseModel):
    """
    A single filesystem entry that matched a search.

    Entries are immutable once created. The Python attribute names are
    descriptive; the serialized names (``name, path, is_dir, size, modified``)
    are the ones the host shell consumes.

    Attributes:
        name: Entry name with its on-disk casing
        path: Canonical absolute path of the entry
        is_directory: Whether the entry is a directory
        size_bytes: Size in bytes as reported by the filesystem
        modified_epoch_seconds: Last modification time in whole seconds since the epoch
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Entry name")
    path: str = Field(..., min_length=1, description="Canonical absolute path")
    is_directory: bool = Field(False, alias='is_dir', description="Whether the entry is a directory")
    size_bytes: int = Field(0, alias='size', ge=0, le=U64_MAX, description="Size in bytes")
    modified_epoch_seconds: int = Field(
        0, alias='modified', ge=0, le=U64_MAX, description="Modification time (epoch seconds)"
    )

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Only absolute paths are accepted."""
        if not Path(v).is_absolute():
            raise ValueError(f"Entry path must be absolute: {v}")
        return v

    @field_validator('modified_epoch_seconds', mode='before')
    @classmethod
    def clamp_modified(cls, v: Any) -> int:
        """Clamp missing or pre-epoch timestamps to 0."""
        if v is None:
            return 0
        v = int(v)
        return v if v > 0 else 0

    def get_extension(self) -> Optional[str]:
        """Get the lower-cased file extension, or None for directories."""
        if self.is_directory:
            return None
        suffix = Path(self.name).suffix
        return suffix.lower() if suffix else None

    def get_directory(self) -> str:
        """Get the directory containing this entry."""
        return str(Path(self.path).parent)

    def get_size_human_readable(self) -> str:
        """Get entry size in human-readable format."""
        size = float(self.size_bytes)
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} PB"

    def modified_datetime(self) -> datetime:
        """Get the modification time as a timezone-aware datetime."""
        return datetime.fromtimestamp(self.modified_epoch_seconds, tz=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to its serialized form."""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileEntry':
        """Create a FileEntry from its serialized form."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the entry."""
        kind = "dir" if self.is_directory else self.get_size_human_readable()
        return f"{self.name} ({kind}) | {self.path}"


class SearchStats(BaseModel):
    """
    Counters collected while walking a directory tree.

    Attributes:
        directories_traversed: Directories that were listed
        entries_scanned: Entries examined (hidden ones excluded)
        entries_matched: Entries added to the results
        entries_skipped: Hidden entries and matches that were dropped
        errors: Non-fatal failures that were tolerated
    """

    directories_traversed: int = Field(0, ge=0)
    entries_scanned: int = Field(0, ge=0)
    entries_matched: int = Field(0, ge=0)
    entries_skipped: int = Field(0, ge=0)
    errors: int = Field(0, ge=0)


class SearchResults(BaseModel):
    """
    Complete results from a search operation.

    Attributes:
        request: The request that produced these results
        entries: Matched entries, ordered by relevance
        stats: Walk statistics (all zero when no traversal happened)
        execution_time: Time taken to execute the search in seconds
        timestamp: When the search was executed
    """

    request: 'SearchRequest' = Field(..., description="The original search request")
    entries: List[FileEntry] = Field(default_factory=list, description="Ranked entries")
    stats: SearchStats = Field(default_factory=SearchStats, description="Walk statistics")
    execution_time: float = Field(0.0, ge=0.0, description="Time taken to execute the search")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the search was executed")

    def get_entry_count(self) -> int:
        """Get the number of returned entries."""
        return len(self.entries)

    def get_directories(self) -> List[FileEntry]:
        """Get only the directory entries."""
        return [entry for entry in self.entries if entry.is_directory]

    def get_files(self) -> List[FileEntry]:
        """Get only the non-directory entries."""
        return [entry for entry in self.entries if not entry.is_directory]

    def to_dict(self) -> Dict[str, Any]:
        """Convert search results to dictionary representation."""
        return {
            'request': self.request.to_dict(),
            'entries': [entry.to_dict() for entry in self.entries],
            'entry_count': self.get_entry_count(),
            'stats': self.stats.model_dump(),
            'execution_time': self.execution_time,
            'timestamp': self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        """String representation of search results."""
        parts = [f"Found {self.get_entry_count()} entries"]
        parts.append(f"Scanned {self.stats.entries_scanned} entries")
        parts.append(f"Took {self.execution_time:.2f}s")

        if self.stats.errors:
            parts.append(f"Errors: {self.stats.errors}")

        return " | ".join(parts)


# Rebuild models to resolve forward references
from .search_request import SearchRequest
SearchResults.model_rebuild()
