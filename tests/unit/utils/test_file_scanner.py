"""Tests for source file discovery."""

from __future__ import annotations

from pathlib import Path

from i18n_extractor.utils.file_scanner import expand_braces, match_patterns, resolve_source_files
from tests.utils.test_helpers import write_source_tree


class TestExpandBraces:
    """Test cases for brace alternative expansion."""

    def test_no_braces(self) -> None:
        """Test a pattern without alternatives."""
        assert expand_braces("src/**/*.js") == ["src/**/*.js"]

    def test_single_group(self) -> None:
        """Test one group of alternatives."""
        assert expand_braces("src/**/*.{vue,js,ts}") == [
            "src/**/*.vue",
            "src/**/*.js",
            "src/**/*.ts",
        ]

    def test_multiple_groups(self) -> None:
        """Test the cartesian product of several groups."""
        assert expand_braces("{a,b}/*.{x,y}") == ["a/*.x", "a/*.y", "b/*.x", "b/*.y"]

    def test_duplicates_removed(self) -> None:
        """Test repeated alternatives."""
        assert expand_braces("*.{js,js}") == ["*.js"]

    def test_single_option_braces_left_alone(self) -> None:
        """Test that braces without a comma are literal."""
        assert expand_braces("src/{pages}/*.vue") == ["src/{pages}/*.vue"]


class TestResolveSourceFiles:
    """Test cases for include/exclude resolution."""

    def test_include_and_exclude(self, tmp_path: Path) -> None:
        """Test that excluded files are removed and the result is sorted."""
        _ = write_source_tree(
            tmp_path,
            {
                "src/b.vue": "",
                "src/a.ts": "",
                "src/nested/deep/c.js": "",
                "src/locales/en.js": "",
                "src/readme.md": "",
                "node_modules/pkg/index.js": "",
            },
        )

        files = resolve_source_files(
            ["src/**/*.{vue,js,ts}", "node_modules/**/*.js"],
            ["src/locales/**", "**/node_modules/**"],
            tmp_path,
        )

        assert files == ["src/a.ts", "src/b.vue", "src/nested/deep/c.js"]

    def test_directories_not_matched(self, tmp_path: Path) -> None:
        """Test that only regular files are returned."""
        (tmp_path / "src" / "folder.js").mkdir(parents=True)
        _ = write_source_tree(tmp_path, {"src/file.js": ""})

        assert resolve_source_files(["src/*.js"], [], tmp_path) == ["src/file.js"]

    def test_no_matches(self, tmp_path: Path) -> None:
        """Test patterns matching nothing."""
        assert resolve_source_files(["src/**/*.vue"], [], tmp_path) == []

    def test_overlapping_patterns_deduplicated(self, tmp_path: Path) -> None:
        """Test a file matched by several include patterns."""
        _ = write_source_tree(tmp_path, {"src/a.js": ""})

        assert resolve_source_files(["src/*.js", "src/**/*.js"], [], tmp_path) == ["src/a.js"]

    def test_match_patterns_relative_results(self, tmp_path: Path) -> None:
        """Test that matches are relative posix paths."""
        _ = write_source_tree(tmp_path, {"src/x/y.js": ""})

        assert match_patterns(["src/**/*.js"], tmp_path) == {"src/x/y.js"}
