"""
Loading of previously generated catalog files.

JSON catalogs are read with the json module. JS/TS catalogs are never
executed: the object literal following a known export prefix is read by a
small parser that understands exactly what catalog files contain, which is
string keys, string values, comments and trailing commas. Anything else is
reported as a CatalogLoadError so the caller can fall back to an empty
mapping.

Accepted shapes:
    export default { "key": "value" };
    module.exports = { "key": "value" };
    <configured header>{ "key": "value" };
    { "key": "value" }
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from ..utils.core.exceptions import CatalogLoadError

logger = logging.getLogger(__name__)

EXPORT_PREFIX = re.compile(
    r"(?:export\s+default|module\.exports\s*=|exports\.default\s*=)\s*(?=\{)"
)
IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
WHITESPACE_AND_COMMENTS = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.DOTALL)
HEX_ESCAPE = re.compile(r"[0-9a-fA-F]+")

SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


class _ObjectLiteralParser:
    """Recursive-descent reader for a flat object literal of strings."""

    def __init__(self, text: str, pos: int) -> None:
        self.text: str = text
        self.pos: int = pos

    def error(self, reason: str) -> CatalogLoadError:
        line = self.text.count("\n", 0, self.pos) + 1
        return CatalogLoadError(f"{reason} at line {line}", context=self.pos)

    def skip(self) -> None:
        match = WHITESPACE_AND_COMMENTS.match(self.text, self.pos)
        if match:
            self.pos = match.end()

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def expect(self, char: str) -> None:
        self.skip()
        if self.peek() != char:
            raise self.error(f"Expected '{char}'")
        self.pos += 1

    def parse_object(self) -> dict[str, str]:
        result: dict[str, str] = {}
        self.expect("{")

        while True:
            self.skip()
            if self.peek() == "}":
                self.pos += 1
                return result

            key = self.parse_key()
            self.expect(":")
            self.skip()
            result[key] = self.parse_string()

            self.skip()
            if self.peek() == ",":
                self.pos += 1
                continue
            if self.peek() == "}":
                self.pos += 1
                return result
            raise self.error("Expected ',' or '}'")

    def parse_key(self) -> str:
        if self.peek() in ("'", '"', "`"):
            return self.parse_string()

        match = IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise self.error("Expected property name")
        self.pos = match.end()
        return match.group(0)

    def parse_string(self) -> str:
        quote = self.peek()
        if quote not in ("'", '"', "`"):
            raise self.error("Expected string literal")
        self.pos += 1

        chars: list[str] = []
        while True:
            if self.pos >= len(self.text):
                raise self.error("Unterminated string literal")

            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            if char == "\\":
                chars.append(self.parse_escape())
                continue
            if char == "\n" and quote != "`":
                raise self.error("Unterminated string literal")
            if quote == "`" and self.text.startswith("${", self.pos):
                raise self.error("Template interpolation is not supported")

            chars.append(char)
            self.pos += 1

    def parse_escape(self) -> str:
        self.pos += 1
        if self.pos >= len(self.text):
            raise self.error("Unterminated escape sequence")

        char = self.text[self.pos]
        self.pos += 1

        if char in SIMPLE_ESCAPES:
            return SIMPLE_ESCAPES[char]
        if char == "\n":
            return ""
        if char == "x":
            return self._read_code_point(2)
        if char == "u":
            if self.peek() == "{":
                end = self.text.find("}", self.pos)
                if end == -1:
                    raise self.error("Invalid unicode escape")
                digits = self.text[self.pos + 1 : end]
                self.pos = end + 1
                return self._decode_hex(digits)
            return self._read_code_point(4)
        return char

    def _read_code_point(self, length: int) -> str:
        digits = self.text[self.pos : self.pos + length]
        self.pos += length
        if len(digits) != length:
            raise self.error("Invalid escape sequence")
        return self._decode_hex(digits)

    def _decode_hex(self, digits: str) -> str:
        if not HEX_ESCAPE.fullmatch(digits):
            raise self.error("Invalid escape sequence")
        try:
            return chr(int(digits, 16))
        except (ValueError, OverflowError) as e:
            raise self.error(f"Invalid code point {digits}") from e


def _find_object_start(content: str, header: str | None) -> int:
    """Locate the opening brace of the exported object literal."""
    match = EXPORT_PREFIX.search(content)
    if match:
        return match.end()

    if header:
        index = content.find(header)
        if index != -1:
            start = content.find("{", index + len(header))
            if start != -1 and not content[index + len(header) : start].strip():
                return start

    leading = WHITESPACE_AND_COMMENTS.match(content)
    start = leading.end() if leading else 0
    if content.startswith("{", start):
        return start

    raise CatalogLoadError("No exported object literal found")


def parse_catalog_source(content: str, header: str | None = None) -> dict[str, str]:
    """
    Read the key/value mapping out of JS or TS catalog source.

    Args:
        content: Source text of the catalog module
        header: Configured header preceding the object literal, if any

    Returns:
        Mapping of key to translation

    Raises:
        CatalogLoadError: If the text is not a recognised catalog shape
    """
    parser = _ObjectLiteralParser(content, _find_object_start(content, header))
    return parser.parse_object()


def parse_catalog_json(content: str) -> dict[str, str]:
    """
    Read the key/value mapping out of a JSON catalog.

    Non-string values are ignored.

    Raises:
        CatalogLoadError: If the text is not a JSON object
    """
    try:
        data: object = json.loads(content)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CatalogLoadError(f"Catalog must be a JSON object, got {type(data).__name__}")

    translations: dict[str, str] = {}
    for key, value in data.items():  # pyright: ignore[reportUnknownVariableType]
        if isinstance(value, str):
            translations[str(key)] = value  # pyright: ignore[reportUnknownArgumentType]
        else:
            logger.debug(f"Ignoring non-string value for key '{key}'")
    return translations


def load_catalog(file_path: Path, header: str | None = None) -> dict[str, str]:
    """
    Load an existing catalog file.

    Args:
        file_path: Path to a .json, .js or .ts catalog
        header: Configured header of js/ts catalogs

    Returns:
        Mapping of key to translation

    Raises:
        CatalogLoadError: If the file cannot be read or parsed
    """
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogLoadError(f"Could not read {file_path}: {e}", context=str(file_path)) from e

    if file_path.suffix == ".json":
        return parse_catalog_json(content)
    return parse_catalog_source(content, header)
