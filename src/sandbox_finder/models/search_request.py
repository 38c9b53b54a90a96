"""
Search request data model for the Sandbox Finder.

This module defines the transient request object a caller hands to the
search orchestrator: the raw query text, an optional search root and an
optional result limit.
"""

from typing import Dict, Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


# Hard ceiling on the number of results any single search may return
MAX_RESULTS_CAP = 100

# Result limit used when the caller does not ask for one
DEFAULT_MAX_RESULTS = 50


def clamp_max_results(value: Optional[int], default: int = DEFAULT_MAX_RESULTS) -> int:
    """Clamp a requested result limit to [0, MAX_RESULTS_CAP]."""
    if value is None:
        value = default
    return max(0, min(int(value), MAX_RESULTS_CAP))


class SearchRequest(BaseModel):
    """
    Represents a single search call.

    The query is kept exactly as the caller sent it; sanitization happens in
    the orchestrator so that an empty sanitized query can short-circuit before
    any path validation.

    Attributes:
        query: Raw query text from the user
        search_root: Optional directory to search from (defaults to home)
        max_results: Optional result limit, clamped to [0, 100] at search time
    """

    query: str = Field("", description="Raw query text")
    search_root: Optional[str] = Field(None, description="Directory to search from")
    max_results: Optional[int] = Field(None, description="Requested maximum number of results")

    @field_validator('search_root')
    @classmethod
    def validate_search_root(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank search root the same as an absent one."""
        if v is None or not v.strip():
            return None
        return v

    def has_search_root(self) -> bool:
        """Check if the caller asked for a specific search root."""
        return self.search_root is not None

    def effective_max_results(self, default: int = DEFAULT_MAX_RESULTS) -> int:
        """Get the result limit after defaulting and clamping."""
        return clamp_max_results(self.max_results, default)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchRequest':
        """Create a SearchRequest instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the search request."""
        parts = [f"Query: '{self.query}'"]
        if self.has_search_root():
            parts.append(f"Root: {Path(self.search_root).name or self.search_root}")
        parts.append(f"Max results: {self.effective_max_results()}")
        return " | ".join(parts)
