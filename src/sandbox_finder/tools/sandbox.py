"""
Sandbox policy for the Sandbox Finder.

This module computes the set of directories a search may touch and decides
whether a canonical path lies inside one of them. Containment is decided by
comparing path components, so a sibling such as ``/home/alice2`` is never
mistaken for a descendant of ``/home/alice``.
"""

import os
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from platformdirs import user_desktop_dir, user_documents_dir, user_downloads_dir

from ..errors import InvalidPathError, PathNotAllowedError
from ..models.config import SandboxConfig


logger = logging.getLogger(__name__)


class Containment(Enum):
    """Relationship between a candidate path and an allowed root."""
    EQUAL = "equal"
    DESCENDANT = "descendant"
    NOT_CONTAINED = "not_contained"


def canonicalize(path: Union[str, Path]) -> Optional[Path]:
    """
    Resolve a path to its canonical absolute form against the real filesystem.

    Args:
        path: Path to resolve (a leading ``~`` is expanded)

    Returns:
        The canonical path, or None if it does not exist or cannot be resolved
    """
    try:
        return Path(path).expanduser().resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return None


def home_directory() -> Path:
    """Get the user's home directory, falling back to the filesystem root."""
    return user_home_directory() or Path('/')


def user_home_directory() -> Optional[Path]:
    """
    Get the user's home directory as a candidate allowed root.

    Returns:
        The home directory, or None if it cannot be determined or is a
        filesystem root (as happens when HOME is set but empty)
    """
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return None
    if not str(home) or home.parent == home:
        return None
    return home


def containment(candidate: Path, root: Path) -> Containment:
    """
    Compare two canonical paths component by component.

    Args:
        candidate: Canonical path being checked
        root: Canonical allowed root

    Returns:
        EQUAL, DESCENDANT or NOT_CONTAINED
    """
    candidate_parts = candidate.parts
    root_parts = root.parts

    if len(candidate_parts) < len(root_parts):
        return Containment.NOT_CONTAINED

    for root_part, candidate_part in zip(root_parts, candidate_parts):
        if os.path.normcase(root_part) != os.path.normcase(candidate_part):
            return Containment.NOT_CONTAINED

    if len(candidate_parts) == len(root_parts):
        return Containment.EQUAL
    return Containment.DESCENDANT


class SandboxPolicy:
    """
    Allow-list of directories a search may operate in.

    The allow-list is computed once per policy instance from the current state
    of the platform; callers build a fresh policy for every search so that
    changes to the user's directories are always picked up.
    """

    # Platform lookups for the user's standard directories
    USER_DIR_SOURCES: List[Callable[[], Optional[Union[str, Path]]]] = [
        user_home_directory,
        user_documents_dir,
        user_downloads_dir,
        user_desktop_dir,
    ]

    def __init__(self, config: Optional[SandboxConfig] = None):
        """
        Initialize the sandbox policy.

        Args:
            config: Sandbox settings; defaults are used when omitted
        """
        self.config = config or SandboxConfig()
        self.allowed_roots = self._compute_allowed_roots()

    def _compute_allowed_roots(self) -> List[Path]:
        """Build the list of canonical allowed directories."""
        roots: List[Path] = []

        if self.config.include_user_dirs:
            for source in self.USER_DIR_SOURCES:
                try:
                    user_dir = source()
                except (OSError, RuntimeError, KeyError) as e:
                    logger.debug(f"Cannot determine user directory via {source.__name__}: {e}")
                    continue
                if not user_dir:
                    continue
                canonical = self._canonical_directory(user_dir)
                # User directories are never filesystem roots
                if canonical is not None and canonical.parent == canonical:
                    logger.warning(f"Ignoring user directory that resolves to a filesystem root: {user_dir}")
                    continue
                if canonical is not None and canonical not in roots:
                    roots.append(canonical)

        for shared_dir in self.config.shared_dirs:
            canonical = self._canonical_directory(shared_dir)
            if canonical is not None and canonical not in roots:
                roots.append(canonical)

        logger.debug(f"Allowed roots: {[str(root) for root in roots]}")
        return roots

    @staticmethod
    def _canonical_directory(candidate: Union[str, Path]) -> Optional[Path]:
        """Canonicalize a candidate root, or None if it is not an existing directory."""
        canonical = canonicalize(candidate)
        if canonical is None or not canonical.is_dir():
            logger.debug(f"Skipping unavailable sandbox directory: {candidate}")
            return None
        return canonical

    def containment_of(self, candidate: Path) -> Containment:
        """
        Get the closest relationship between a candidate and any allowed root.

        Args:
            candidate: Canonical path to check

        Returns:
            EQUAL if the candidate is an allowed root, DESCENDANT if it is inside
            one, NOT_CONTAINED otherwise
        """
        result = Containment.NOT_CONTAINED
        for root in self.allowed_roots:
            relation = containment(candidate, root)
            if relation is Containment.EQUAL:
                return relation
            if relation is Containment.DESCENDANT:
                result = relation
        return result

    def is_allowed(self, candidate: Path) -> bool:
        """Check whether a canonical path equals or lies under an allowed root."""
        return self.containment_of(candidate) is not Containment.NOT_CONTAINED

    def resolve_root(self, user_root: Optional[Union[str, Path]] = None) -> Path:
        """
        Resolve and validate the directory a search should start from.

        Args:
            user_root: Requested search root; the home directory when None

        Returns:
            The canonical search root

        Raises:
            InvalidPathError: If the path does not exist, is not a directory or
                cannot be canonicalized
            PathNotAllowedError: If the canonical path is outside every allowed root
        """
        target = home_directory() if user_root is None else user_root

        try:
            root_path = Path(target).expanduser().resolve(strict=True)
        except (OSError, RuntimeError, ValueError) as e:
            raise InvalidPathError(f"Cannot resolve search path '{target}': {e}", target) from e

        if not root_path.is_dir():
            raise InvalidPathError(f"Search path is not a directory: {root_path}", root_path)

        if not self.is_allowed(root_path):
            raise PathNotAllowedError(
                f"Search path '{root_path}' is outside the allowed directories", root_path
            )

        logger.info(f"Resolved search root: {root_path}")
        return root_path
