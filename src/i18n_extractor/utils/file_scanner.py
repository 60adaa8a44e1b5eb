"""
Source file discovery from include/exclude glob patterns.

Patterns are resolved relative to the project root and support ``**`` for
recursive matching and ``{a,b}`` alternatives, e.g. ``src/**/*.{vue,ts}``.
"""

from __future__ import annotations

import glob
import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

BRACE_GROUP = re.compile(r"\{([^{}]*,[^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """
    Expand ``{a,b}`` alternatives in a glob pattern.

    Args:
        pattern: Glob pattern, e.g. ``src/**/*.{js,ts}``

    Returns:
        Patterns without alternatives, e.g. ``["src/**/*.js", "src/**/*.ts"]``
    """
    match = BRACE_GROUP.search(pattern)
    if not match:
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        for result in expand_braces(f"{head}{option}{tail}"):
            if result not in expanded:
                expanded.append(result)
    return expanded


def _normalize(match: str, root_dir: Path) -> str:
    """Express a glob match relative to the root with forward slashes."""
    path = Path(match)
    if path.is_absolute():
        try:
            path = path.relative_to(root_dir)
        except ValueError:
            return path.as_posix()
    return Path(os.path.normpath(path)).as_posix()


def match_patterns(patterns: Iterable[str], root_dir: Path) -> set[str]:
    """
    Resolve glob patterns to the files they match.

    Args:
        patterns: Glob patterns relative to the root (absolute patterns allowed)
        root_dir: Project root

    Returns:
        Set of matched file paths, relative to the root where possible
    """
    matched: set[str] = set()

    for pattern in patterns:
        for expanded in expand_braces(pattern):
            try:
                results = glob.glob(expanded, root_dir=root_dir, recursive=True)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not resolve pattern '{expanded}': {e}")
                continue

            for result in results:
                if (root_dir / result).is_file():
                    matched.add(_normalize(result, root_dir))

    return matched


def resolve_source_files(
    include: Iterable[str], exclude: Iterable[str], root_dir: Path
) -> list[str]:
    """
    Resolve the files to scan.

    Args:
        include: Glob patterns of files to scan
        exclude: Glob patterns of files to skip
        root_dir: Project root

    Returns:
        Sorted list of file paths
    """
    root = root_dir.resolve()
    included = match_patterns(include, root)
    excluded = match_patterns(exclude, root)

    files = sorted(included - excluded)
    logger.debug(f"Resolved {len(files)} file(s), {len(included & excluded)} excluded")
    return files
