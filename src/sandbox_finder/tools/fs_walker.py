"""
Filesystem walker for the Sandbox Finder.

This module provides bounded depth-first traversal of a directory tree,
collecting entries whose names contain the query. Traversal is limited both by
depth below the search root and by the number of results collected, and every
collected path is checked against the sandbox before it is returned.
"""

import os
import stat
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import DirectoryReadError, EntryReadError
from ..models.config import MAX_DEPTH
from ..models.search_results import FileEntry, SearchStats
from .sandbox import SandboxPolicy


logger = logging.getLogger(__name__)


# Names starting with these are never returned or descended into
HIDDEN_PREFIXES = ('.', '~')


class DirectoryWalker:
    """
    Depth-limited walker that collects entries matching a query.

    Pending directories are kept on an explicit stack together with their
    depth, so deep trees never hit the interpreter's recursion limit.

    Failures are handled asymmetrically: the search root must be readable and
    its matching entries must be statable, otherwise the walk fails. Anything
    deeper that cannot be read is logged and left out of the results.
    """

    def __init__(self, policy: SandboxPolicy, max_depth: int = MAX_DEPTH):
        """
        Initialize the walker.

        Args:
            policy: Sandbox policy every collected path must satisfy
            max_depth: Deepest level (root is 0) whose contents are listed, capped at 3
        """
        self.policy = policy
        self.max_depth = max(0, min(max_depth, MAX_DEPTH))
        self._stats = SearchStats()

    def walk(self, root: Path, lowered_query: str, max_results: int) -> List[FileEntry]:
        """
        Walk the tree under root and collect matching entries.

        Args:
            root: Canonical directory to start from (depth 0)
            lowered_query: Sanitized, lower-cased query text
            max_results: Maximum number of entries to collect

        Returns:
            Matching entries in traversal order

        Raises:
            DirectoryReadError: If the root directory cannot be listed
            EntryReadError: If a matching entry directly under root cannot be read
        """
        self.reset_stats()
        query = lowered_query.lower()
        results: List[FileEntry] = []
        pending: List[Tuple[Path, int]] = [(Path(root), 0)]

        logger.info(f"Walking directory tree: {root} (max_depth={self.max_depth}, max_results={max_results})")

        while pending:
            directory, depth = pending.pop()
            if len(results) >= max_results or depth > self.max_depth:
                continue

            entries = self._list_directory(directory, depth)
            if entries is None:
                continue

            subdirs: List[Path] = []
            for dir_entry in entries:
                if len(results) >= max_results:
                    break

                if dir_entry.name.startswith(HIDDEN_PREFIXES):
                    self._stats.entries_skipped += 1
                    continue

                self._stats.entries_scanned += 1

                if query in dir_entry.name.lower():
                    file_entry = self._read_entry(dir_entry, depth)
                    if file_entry is not None:
                        results.append(file_entry)
                        self._stats.entries_matched += 1

                if depth < self.max_depth and self._is_traversable_dir(dir_entry):
                    subdirs.append(Path(dir_entry.path))

            # Reversed so the first subdirectory is popped first
            pending.extend((subdir, depth + 1) for subdir in reversed(subdirs))

        logger.info(
            f"Walk finished: {len(results)} matches, "
            f"{self._stats.directories_traversed} directories, {self._stats.errors} errors"
        )
        return results

    def _list_directory(self, directory: Path, depth: int) -> Optional[List[os.DirEntry]]:
        """
        List a directory's entries.

        Returns:
            The entries, or None if a non-root directory could not be read
        """
        try:
            with os.scandir(directory) as iterator:
                entries = list(iterator)
        except OSError as e:
            if depth == 0:
                raise DirectoryReadError(f"Cannot read directory {directory}: {e}", directory) from e
            logger.warning(f"Skipping unreadable directory {directory}: {e}")
            self._stats.errors += 1
            return None

        self._stats.directories_traversed += 1
        return entries

    def _read_entry(self, dir_entry: os.DirEntry, depth: int) -> Optional[FileEntry]:
        """
        Build a FileEntry for a matching directory entry.

        Args:
            dir_entry: The matching entry
            depth: Depth of the directory that contains it

        Returns:
            The FileEntry, or None if the entry was skipped
        """
        entry_path = Path(dir_entry.path)
        try:
            canonical = entry_path.resolve(strict=True)
            stat_result = self._stat_entry(canonical)
        except FileNotFoundError:
            # Removed or renamed since the directory was listed
            logger.debug(f"Entry vanished during search: {entry_path}")
            self._stats.entries_skipped += 1
            return None
        except (OSError, RuntimeError) as e:
            if depth == 0:
                raise EntryReadError(f"Cannot read metadata for {entry_path}: {e}", entry_path) from e
            logger.warning(f"Skipping unreadable entry {entry_path}: {e}")
            self._stats.errors += 1
            return None

        if not self.policy.is_allowed(canonical):
            logger.debug(f"Skipping entry that resolves outside the sandbox: {entry_path} -> {canonical}")
            self._stats.entries_skipped += 1
            return None

        return FileEntry(
            name=dir_entry.name,
            path=str(canonical),
            is_directory=stat.S_ISDIR(stat_result.st_mode),
            size_bytes=stat_result.st_size,
            modified_epoch_seconds=int(stat_result.st_mtime)
        )

    def _stat_entry(self, path: Path) -> os.stat_result:
        """Read filesystem metadata for a canonical path."""
        return os.stat(path)

    def _is_traversable_dir(self, dir_entry: os.DirEntry) -> bool:
        """Check whether an entry is a real directory (symlinks are not followed)."""
        try:
            return dir_entry.is_dir(follow_symlinks=False)
        except OSError:
            return False

    def get_stats(self) -> SearchStats:
        """
        Get statistics about the last walk.

        Returns:
            A copy of the walk statistics
        """
        return self._stats.model_copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = SearchStats()
