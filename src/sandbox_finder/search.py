"""
Search orchestration for the Sandbox Finder.

This module ties the search tools together into the single operation exposed
to the host application: sanitize the query, validate the search root against
the sandbox, walk the tree, and rank what was found.
"""

import time
import logging
from pathlib import Path
from typing import List, Optional, Union

from .models.config import FinderConfig
from .models.search_request import SearchRequest
from .models.search_results import FileEntry, SearchResults
from .tools.fs_walker import DirectoryWalker
from .tools.sandbox import SandboxPolicy
from .tools.sanitizer import sanitize
from .tools.scorer import rank_entries


logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Runs sandboxed file searches.

    An orchestrator only holds its configuration. Everything a search needs,
    including the allow-list, is built fresh inside each call, so a single
    instance can serve concurrent callers without locking.
    """

    def __init__(self, config: Optional[FinderConfig] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Search configuration; defaults are used when omitted
        """
        self.config = config or FinderConfig()

    def run(self, request: SearchRequest) -> SearchResults:
        """
        Execute a search request.

        An empty sanitized query returns no results without validating the
        search root, so an invalid root paired with an empty query is not an
        error.

        Args:
            request: The search request

        Returns:
            SearchResults with entries ordered by relevance

        Raises:
            InvalidPathError: If the search root does not exist or is not a directory
            PathNotAllowedError: If the search root is outside the sandbox
            DirectoryReadError: If the search root cannot be listed
            EntryReadError: If a matching entry directly under the root cannot be read
        """
        start_time = time.perf_counter()

        sanitized = sanitize(request.query)
        if not sanitized:
            logger.debug(f"Query '{request.query}' is empty after sanitization, skipping search")
            return SearchResults(request=request, execution_time=time.perf_counter() - start_time)

        policy = SandboxPolicy(self.config.sandbox)
        root = policy.resolve_root(request.search_root or self.config.default_search_path)

        max_results = request.effective_max_results(self.config.limits.default_max_results)
        lowered_query = sanitized.lower()

        walker = DirectoryWalker(policy, max_depth=self.config.limits.max_depth)
        entries = walker.walk(root, lowered_query, max_results)
        ranked = rank_entries(entries, lowered_query)

        return SearchResults(
            request=request,
            entries=ranked,
            stats=walker.get_stats(),
            execution_time=time.perf_counter() - start_time
        )

    def search(self,
               query: str,
               search_path: Optional[Union[str, Path]] = None,
               max_results: Optional[int] = None) -> List[FileEntry]:
        """
        Search for entries whose names contain the query.

        Args:
            query: Raw query text
            search_path: Directory to search from (home directory when None)
            max_results: Result limit, clamped to [0, 100] (50 when None)

        Returns:
            Matching entries, most relevant first
        """
        request = SearchRequest(
            query=query,
            search_root=str(search_path) if search_path is not None else None,
            max_results=max_results
        )
        return self.run(request).entries


def search(query: str,
           search_path: Optional[Union[str, Path]] = None,
           max_results: Optional[int] = None,
           config: Optional[FinderConfig] = None) -> List[FileEntry]:
    """
    Convenience function to run a single search.

    Args:
        query: Raw query text
        search_path: Directory to search from (optional)
        max_results: Result limit (optional)
        config: Search configuration (optional)

    Returns:
        Matching entries, most relevant first
    """
    return SearchOrchestrator(config).search(query, search_path, max_results)
