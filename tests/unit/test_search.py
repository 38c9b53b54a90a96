"""
Unit tests for the search orchestrator.

Tests the end-to-end search flow: sanitization short-circuits, sandbox
validation, result limits, ranking, and the convenience search function.
"""

import os
import sys
import tempfile
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch
import pytest

import sandbox_finder
from sandbox_finder.errors import InvalidPathError, PathNotAllowedError
from sandbox_finder.models.config import FinderConfig, LimitsConfig, SandboxConfig
from sandbox_finder.models.search_request import SearchRequest
from sandbox_finder.search import SearchOrchestrator, search
from sandbox_finder.tools.scorer import score


class TestSearchOrchestrator:
    """Test cases for the SearchOrchestrator class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.base = Path(self.temp_dir).resolve()
        self.test_root = self.base / "root"
        self.outside = self.base / "outside"
        self.test_root.mkdir()
        self.outside.mkdir()

        for file_path in ["test.txt", "document.pdf", "subdir/nested.txt"]:
            full_path = self.test_root / file_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(f"Content of {file_path}")

        self.config = FinderConfig(
            sandbox=SandboxConfig(include_user_dirs=False, shared_dirs=[str(self.test_root)])
        )
        self.orchestrator = SearchOrchestrator(self.config)

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def _make_files(self, count: int, prefix: str = "item"):
        for i in range(count):
            (self.test_root / f"{prefix}_{i:03d}.txt").write_text("x")

    def test_basic_scenario(self):
        """Test the reference scenario: prefix match found, non-match excluded."""
        results = self.orchestrator.search("test", str(self.test_root))
        names = [entry.name for entry in results]

        assert "test.txt" in names
        assert "document.pdf" not in names
        assert score("test.txt", "test") == pytest.approx(82.5)

    def test_empty_query(self):
        """Test that an empty query returns no results."""
        assert self.orchestrator.search("", str(self.test_root)) == []

    def test_empty_query_skips_path_validation(self):
        """Test that an invalid path with an empty query is not an error."""
        assert self.orchestrator.search("", "/nonexistent/path") == []
        assert self.orchestrator.search("", str(self.outside)) == []

    def test_query_empty_after_sanitization(self):
        """Test that a query with only disallowed characters behaves like an empty one."""
        assert self.orchestrator.search("/\\*?|", "/nonexistent/path") == []

    def test_whitespace_query_is_searched(self):
        """Test that a whitespace-only query matches names containing spaces."""
        (self.test_root / "my file.txt").write_text("x")

        results = self.orchestrator.search(" ", str(self.test_root))
        assert [entry.name for entry in results] == ["my file.txt"]

    def test_whitespace_query_validates_path(self):
        """Test that a whitespace-only query still validates the search path."""
        with pytest.raises(InvalidPathError):
            self.orchestrator.search("   ", "/nonexistent/path")
        with pytest.raises(PathNotAllowedError):
            self.orchestrator.search(" ", str(self.outside))

    def test_accented_query(self):
        """Test that accented Latin queries find matching names."""
        (self.test_root / "résumé.pdf").write_text("cv")

        results = self.orchestrator.search("RÉSUMÉ", str(self.test_root))
        assert [entry.name for entry in results] == ["résumé.pdf"]

    @pytest.mark.skipif(sys.platform == "win32", reason="Windows trims trailing spaces from names")
    def test_search_root_with_surrounding_spaces(self):
        """Test that a directory whose name has leading or trailing spaces can be searched."""
        spaced = self.test_root / " spaced dir "
        spaced.mkdir()
        (spaced / "inside.txt").write_text("x")

        results = self.orchestrator.search("inside", str(spaced))
        assert [entry.path for entry in results] == [str(spaced / "inside.txt")]

    def test_nonexistent_path(self):
        """Test that a missing search path is an invalid path."""
        with pytest.raises(InvalidPathError):
            self.orchestrator.search("test", "/nonexistent/path")

    @pytest.mark.skipif(not Path("/etc").is_dir(), reason="requires /etc")
    def test_path_outside_sandbox(self):
        """Test that a system directory is rejected."""
        with pytest.raises(PathNotAllowedError):
            self.orchestrator.search("test", "/etc")

    def test_dotdot_escape(self):
        """Test that '..' segments cannot escape the sandbox."""
        with pytest.raises(PathNotAllowedError):
            self.orchestrator.search("test", str(self.test_root) + "/../outside")

    def test_max_depth_zero(self):
        """Test that max_depth=0 excludes entries in subdirectories."""
        config = FinderConfig(
            limits=LimitsConfig(max_depth=0),
            sandbox=SandboxConfig(include_user_dirs=False, shared_dirs=[str(self.test_root)])
        )
        results = SearchOrchestrator(config).search("nested", str(self.test_root))
        assert results == []

    def test_nested_found_with_default_depth(self):
        """Test that subdirectories are searched by default."""
        results = self.orchestrator.search("nested", str(self.test_root))
        assert [entry.name for entry in results] == ["nested.txt"]

    def test_case_insensitive_queries_equivalent(self):
        """Test that 'test' and 'TEST' return the same entries."""
        lower = self.orchestrator.search("test", str(self.test_root))
        upper = self.orchestrator.search("TEST", str(self.test_root))
        assert lower == upper

    def test_query_sanitized_before_matching(self):
        """Test that disallowed characters are dropped from the query."""
        assert self.orchestrator.search("te/st", str(self.test_root)) == \
            self.orchestrator.search("test", str(self.test_root))

    def test_ranking(self):
        """Test that results are ordered exact, prefix, then substring."""
        (self.test_root / "test").mkdir()
        (self.test_root / "my_test.txt").write_text("x")

        results = self.orchestrator.search("test", str(self.test_root))
        assert [entry.name for entry in results] == ["test", "test.txt", "my_test.txt"]

    def test_ranking_ties_ordered_by_path(self):
        """Test that equal scores are ordered by path."""
        for name in ["b", "a", "c"]:
            (self.test_root / name).mkdir()
            (self.test_root / name / "report.txt").write_text("x")

        results = self.orchestrator.search("report", str(self.test_root))
        paths = [entry.path for entry in results]
        assert paths == sorted(paths)
        assert len(paths) == 3

    def test_default_max_results(self):
        """Test that 50 results are returned when no limit is given."""
        self._make_files(60)
        assert len(self.orchestrator.search("item", str(self.test_root))) == 50

    def test_max_results_clamped_to_cap(self):
        """Test that limits above 100 are clamped."""
        self._make_files(120)
        assert len(self.orchestrator.search("item", str(self.test_root), max_results=150)) == 100

    def test_negative_max_results(self):
        """Test that a negative limit yields no results."""
        self._make_files(3)
        assert self.orchestrator.search("item", str(self.test_root), max_results=-5) == []

    def test_explicit_max_results(self):
        """Test that a small explicit limit is honoured."""
        self._make_files(10)
        assert len(self.orchestrator.search("item", str(self.test_root), max_results=4)) == 4

    def test_configured_default_max_results(self):
        """Test that the configured default limit is used."""
        self._make_files(10)
        config = FinderConfig(
            limits=LimitsConfig(default_max_results=5),
            sandbox=SandboxConfig(include_user_dirs=False, shared_dirs=[str(self.test_root)])
        )
        assert len(SearchOrchestrator(config).search("item", str(self.test_root))) == 5

    def test_configured_default_search_path(self):
        """Test that the configured default root is used when none is given."""
        config = FinderConfig(
            default_search_path=str(self.test_root / "subdir"),
            sandbox=SandboxConfig(include_user_dirs=False, shared_dirs=[str(self.test_root)])
        )
        results = SearchOrchestrator(config).search("t")
        assert [entry.name for entry in results] == ["nested.txt"]

    def test_defaults_to_home(self):
        """Test that the home directory is searched when no root is configured."""
        with patch('sandbox_finder.tools.sandbox.home_directory', return_value=self.test_root):
            results = self.orchestrator.search("document")
        assert [entry.name for entry in results] == ["document.pdf"]

    def test_path_objects_accepted(self):
        """Test that a Path may be passed as the search path."""
        results = self.orchestrator.search("document", self.test_root)
        assert [entry.name for entry in results] == ["document.pdf"]

    def test_run_returns_results_envelope(self):
        """Test that run() reports entries, stats and the request."""
        request = SearchRequest(query="test", search_root=str(self.test_root))
        results = self.orchestrator.run(request)

        assert results.request is request
        assert results.get_entry_count() == len(results.entries) == 1
        assert results.stats.entries_matched == 1
        assert results.stats.directories_traversed == 2
        assert results.execution_time >= 0.0

    def test_run_empty_query_has_zero_stats(self):
        """Test that a short-circuited search reports no traversal."""
        results = self.orchestrator.run(SearchRequest(query="", search_root="/nonexistent/path"))
        assert results.entries == []
        assert results.stats.directories_traversed == 0

    def test_results_serialize(self):
        """Test that returned entries serialize with the shell's field names."""
        results = self.orchestrator.search("document", str(self.test_root))
        data = results[0].to_dict()
        assert set(data) == {"name", "path", "is_dir", "size", "modified"}
        assert data["path"] == str(self.test_root / "document.pdf")

    def test_concurrent_searches(self):
        """Test that one orchestrator can serve concurrent callers."""
        self._make_files(20)

        def run_search(_):
            return [entry.path for entry in self.orchestrator.search("item", str(self.test_root))]

        with ThreadPoolExecutor(max_workers=4) as executor:
            outcomes = list(executor.map(run_search, range(8)))

        assert all(outcome == outcomes[0] for outcome in outcomes)
        assert len(outcomes[0]) == 20


class TestSearchFunction:
    """Test cases for the module-level search function."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.test_root = Path(self.temp_dir).resolve()
        (self.test_root / "alpha_notes.txt").write_text("alpha")
        self.config = FinderConfig(
            sandbox=SandboxConfig(include_user_dirs=False, shared_dirs=[str(self.test_root)])
        )

    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_search_with_config(self):
        """Test searching with an explicit configuration."""
        results = search("alpha", str(self.test_root), config=self.config)
        assert [entry.name for entry in results] == ["alpha_notes.txt"]

    @pytest.mark.skipif(sys.platform == "win32" or not Path("/tmp").is_dir(), reason="requires /tmp")
    def test_default_config_allows_shared_tmp(self):
        """Test searching /tmp with the default sandbox."""
        shared_root = Path(tempfile.mkdtemp(dir="/tmp")).resolve()
        try:
            (shared_root / "alpha_shared.txt").write_text("alpha")
            results = search("alpha_shared", str(shared_root))
            assert [entry.name for entry in results] == ["alpha_shared.txt"]
        finally:
            shutil.rmtree(shared_root)

    def test_package_level_export(self):
        """Test that the package exposes the search function."""
        assert sandbox_finder.search is search
        results = sandbox_finder.search("alpha", str(self.test_root), max_results=1, config=self.config)
        assert len(results) == 1

    def test_empty_query(self):
        assert search("") == []
