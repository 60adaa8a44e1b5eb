"""
Data models shared across the extraction pipeline.

``ExtractedKey`` is the unit of work: one unique message string observed in
the source tree, keyed by its literal text. ``ExtractionStats`` collects the
counters reported at the end of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple, override

DEFAULT_NAMESPACE = "common"


@dataclass
class ExtractedKey:
    """One unique message string found in the source tree."""

    key: str
    message: str
    files: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    has_plural: bool = False
    has_date: bool = False
    line: int | None = None
    namespace: str | None = None

    def copy(self) -> ExtractedKey:
        """Return a copy that does not share the mutable file/variable lists."""
        return ExtractedKey(
            key=self.key,
            message=self.message,
            files=list(self.files),
            variables=list(self.variables),
            has_plural=self.has_plural,
            has_date=self.has_date,
            line=self.line,
            namespace=self.namespace,
        )

    @property
    def resolved_namespace(self) -> str:
        """Namespace of the key, falling back to the ungrouped namespace."""
        return self.namespace or DEFAULT_NAMESPACE


class MigrationRecord(NamedTuple):
    """A catalog file that was renamed to a sanitized name."""

    old_name: str
    new_name: str
    merged: bool


class ExtractionStats:
    """Counters accumulated over one extraction run."""

    def __init__(self) -> None:
        self.generated: int = 0
        self.skipped: int = 0
        self.preserved: int = 0
        self.new_keys: int = 0
        self.total_keys: int = 0
        self.files_scanned: int = 0
        self.files_failed: int = 0
        self.messages_rejected: int = 0
        self.migrations: list[MigrationRecord] = []

    @override
    def __str__(self) -> str:
        """String representation of extraction results."""
        return (
            f"Extraction Results: "
            f"{self.generated} generated, "
            f"{self.skipped} unchanged, "
            f"{self.preserved} translations preserved, "
            f"{self.new_keys} keys need translation"
        )
