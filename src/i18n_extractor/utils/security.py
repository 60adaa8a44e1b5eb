"""
Escaping and path-safety helpers for generated catalog files.

Every key and value written into a generated catalog passes through
``escape_string`` so that no message text can terminate the surrounding
string literal early.
"""

from __future__ import annotations

import re
from pathlib import Path

from .core.exceptions import PathTraversalError

VARIABLE_NAME_PATTERN = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_INVALID_IDENTIFIER_CHARS = re.compile(r"[^a-zA-Z0-9_$]")

_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("'", "\\'"),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)


def escape_string(value: object) -> str:
    """
    Escape a string for embedding inside a quoted literal in generated code.

    Args:
        value: Value to escape; non-strings yield an empty string

    Returns:
        Escaped string with remaining control characters removed
    """
    if not isinstance(value, str):
        return ""

    escaped = value
    for raw, replacement in _ESCAPES:
        escaped = escaped.replace(raw, replacement)
    return _CONTROL_CHARS.sub("", escaped)


def is_valid_variable_name(name: str) -> bool:
    """Check that an interpolation variable name is a plain identifier."""
    return bool(VARIABLE_NAME_PATTERN.match(name))


def sanitize_variable_name(name: str) -> str:
    """
    Turn an arbitrary string into a usable identifier.

    Args:
        name: Raw name, e.g. a namespace such as ``pages.auth``

    Returns:
        Identifier with invalid characters replaced by underscores
    """
    if not name:
        return ""

    sanitized = _INVALID_IDENTIFIER_CHARS.sub("_", name)
    if sanitized[0].isdigit():
        return f"_{sanitized}"
    return sanitized


def validate_path(file_path: str | Path, base_dir: str | Path) -> Path:
    """
    Resolve a path and make sure it stays inside the base directory.

    Args:
        file_path: Path to validate, absolute or relative to ``base_dir``
        base_dir: Directory the path must be contained in

    Returns:
        The resolved absolute path

    Raises:
        PathTraversalError: If the path resolves outside of ``base_dir``
    """
    base = Path(base_dir).resolve()
    resolved = (base / file_path).resolve()

    if not resolved.is_relative_to(base):
        raise PathTraversalError(
            f"Path traversal detected: {file_path!s} is outside project directory {base}",
            context=str(file_path),
        )

    return resolved
