"""
Configuration data models for the Sandbox Finder.

This module defines the data structures for managing search configuration:
result and depth limits, the default search root, and the sandbox settings
that decide which directories a search may touch.
"""

from typing import Dict, List, Optional, Any
from pathlib import Path
import platform
from pydantic import BaseModel, Field, field_validator

from .search_request import DEFAULT_MAX_RESULTS


# Hard ceiling on traversal depth below the search root
MAX_DEPTH = 3


def default_shared_dirs() -> List[str]:
    """
    Get the platform's shared and temporary directories.

    Returns:
        List of directory paths; entries that do not exist are filtered out
        later, when the allow-list is computed
    """
    system = platform.system().lower()

    if system == "windows":
        return ["C:\\Users\\Public"]
    elif system == "darwin":  # macOS
        return ["/tmp", "/Users/Shared"]
    return ["/tmp", "/var/tmp"]


class LimitsConfig(BaseModel):
    """
    Configuration for search limits.

    Attributes:
        default_max_results: Result limit used when the caller gives none
        max_depth: How many levels below the search root may be listed
    """

    default_max_results: int = Field(DEFAULT_MAX_RESULTS, ge=0, description="Default result limit")
    max_depth: int = Field(MAX_DEPTH, ge=0, le=MAX_DEPTH, description="Maximum traversal depth")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class SandboxConfig(BaseModel):
    """
    Configuration for the directories a search is allowed to touch.

    Attributes:
        include_user_dirs: Whether home, documents, downloads and desktop are allowed
        shared_dirs: Shared and temporary directories that are allowed when they exist
    """

    include_user_dirs: bool = Field(True, description="Allow the user's standard directories")
    shared_dirs: List[str] = Field(default_factory=default_shared_dirs, description="Allowed shared directories")

    @field_validator('shared_dirs')
    @classmethod
    def validate_shared_dirs(cls, v: List[str]) -> List[str]:
        """Drop blank entries and expand user paths."""
        normalized = []
        for entry in v:
            if not entry or not entry.strip():
                continue
            expanded = str(Path(entry.strip()).expanduser())
            if expanded not in normalized:
                normalized.append(expanded)
        return normalized

    def get_missing_shared_dirs(self) -> List[str]:
        """Get configured shared directories that do not exist."""
        return [entry for entry in self.shared_dirs if not Path(entry).is_dir()]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class FinderConfig(BaseModel):
    """
    Main configuration class for the Sandbox Finder.

    Attributes:
        default_search_path: Root used when a search names none (home if unset)
        limits: Result and depth limits
        sandbox: Allowed directory settings
    """

    default_search_path: Optional[str] = Field(None, description="Default search root")
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="Search limits")
    sandbox: SandboxConfig = Field(default_factory=SandboxConfig, description="Sandbox settings")

    @field_validator('default_search_path')
    @classmethod
    def validate_default_search_path(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank path as unset and expand user paths."""
        if v is None or not v.strip():
            return None
        return str(Path(v).expanduser())

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any warnings."""
        warnings = []

        missing = self.sandbox.get_missing_shared_dirs()
        if missing:
            warnings.append(f"Shared directories do not exist and will be ignored: {', '.join(missing)}")

        if not self.sandbox.include_user_dirs and len(missing) == len(self.sandbox.shared_dirs):
            warnings.append("Sandbox has no usable directories; every search will be rejected")

        if self.default_search_path and not Path(self.default_search_path).is_dir():
            warnings.append(f"Default search path is not a directory: {self.default_search_path}")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'default_search_path': self.default_search_path,
            'limits': self.limits.to_dict(),
            'sandbox': self.sandbox.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FinderConfig':
        """Create configuration from dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        root = self.default_search_path or "home"
        return (
            f"FinderConfig(root={root}, max_results={self.limits.default_max_results}, "
            f"max_depth={self.limits.max_depth}, shared_dirs={len(self.sandbox.shared_dirs)})"
        )
