"""
Translation key extraction from source files.

Scans source text for ``t("...")`` calls whose single argument is a literal
string (double quotes, single quotes or backticks, possibly spanning several
lines) and turns every literal into an ``ExtractedKey``.

Usage Examples:
    Extract keys from a file:
        >>> extractor = KeyExtractor()
        >>> keys = extractor.extract_from_file(Path("src/pages/Login.vue"))
        >>> [k.key for k in keys]
        ['Sign in', 'Welcome back, {name}!']

    Merge the keys of two files:
        >>> merged = extractor.merge_keys(keys_a, keys_b)
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..models import ExtractedKey
from ..utils.core.exceptions import FileReadError, FormatError
from .message_parser import classify, validate_message_format

logger = logging.getLogger(__name__)

# t("literal") where the literal contains no unescaped delimiter. A call whose
# argument is a variable or an expression does not match and is skipped.
CALL_PATTERN = re.compile(
    r"""\bt\(\s*(?P<quote>['"`])(?P<message>(?:\\.|(?!(?P=quote))[^\\])+)(?P=quote)\s*\)""",
    re.DOTALL,
)

TEMPLATE_INTERPOLATION = "${"


class KeyExtractor:
    """Extracts literal translation keys from source code."""

    def __init__(self) -> None:
        self.rejected_count: int = 0

    def extract_from_file(self, file_path: str | Path) -> list[ExtractedKey]:
        """
        Extract translation keys from a single file.

        Args:
            file_path: Path to the source file

        Returns:
            Keys found in the file, in order of first occurrence

        Raises:
            FileReadError: If the file cannot be read or decoded
        """
        path = Path(file_path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(f"Could not read {path}: {e}", context=str(path)) from e

        return self.extract_from_text(content, str(file_path))

    def extract_from_text(self, code: str, file_path: str) -> list[ExtractedKey]:
        """
        Extract translation keys from source text.

        Messages failing validation are skipped with a warning. A message
        repeated within the same file is reported once, at its first line.

        Args:
            code: Source code
            file_path: Path recorded on every extracted key

        Returns:
            Keys found in the text, in order of first occurrence
        """
        keys: list[ExtractedKey] = []
        seen: set[str] = set()

        for match in CALL_PATTERN.finditer(code):
            message = match.group("message")

            if message in seen:
                continue
            seen.add(message)

            line = self.get_line_number(code, match.start())

            if match.group("quote") == "`" and TEMPLATE_INTERPOLATION in message:
                logger.debug(f"Skipping interpolated template literal in {file_path}:{line}")
                continue

            try:
                validate_message_format(message)
            except FormatError as e:
                self.rejected_count += 1
                logger.warning(f"Skipping invalid message in {file_path}:{line}: {e}")
                continue

            metadata = classify(message)
            keys.append(
                ExtractedKey(
                    key=message,
                    message=message,
                    files=[file_path],
                    variables=metadata.variables,
                    has_plural=metadata.has_plural,
                    has_date=metadata.has_date,
                    line=line,
                )
            )
            logger.debug(f"Found translation key: '{message}' at {file_path}:{line}")

        return keys

    @staticmethod
    def get_line_number(code: str, index: int) -> int:
        """Return the 1-based line number of a character offset."""
        return code.count("\n", 0, index) + 1

    @staticmethod
    def merge_keys(
        first: list[ExtractedKey], second: list[ExtractedKey]
    ) -> list[ExtractedKey]:
        """
        Merge two key collections into one.

        Keys are unioned by exact text. When a key exists on both sides its
        file lists are unioned; namespace and line number of the first side
        are kept. The result is sorted by key text, and every file list is
        sorted, so merging is deterministic and associative.

        Args:
            first: Keys accumulated so far
            second: Keys to merge in

        Returns:
            New list of merged keys; inputs are not modified
        """
        merged: dict[str, ExtractedKey] = {}

        for key in first:
            merged[key.key] = key.copy()

        for key in second:
            existing = merged.get(key.key)
            if existing is None:
                merged[key.key] = key.copy()
                continue

            existing.files = sorted(set(existing.files) | set(key.files))
            if existing.namespace is None:
                existing.namespace = key.namespace
            if existing.line is None:
                existing.line = key.line

        result = sorted(merged.values(), key=lambda k: k.key)
        for key in result:
            key.files = sorted(set(key.files))
        return result
