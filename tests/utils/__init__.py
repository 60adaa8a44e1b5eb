"""
Test utilities package for i18n extractor tests.

### test_helpers.py
- `write_source_tree()`: Lay out source files below a project root
- `temp_config_file()`: Context manager for a temporary config file
- `read_catalog()`: Load a generated catalog back into a mapping
- `snapshot_directory()`: Capture file bytes for idempotence checks
- `make_key()`: Build ExtractedKey instances for generator tests
"""

from __future__ import annotations

from .test_helpers import (
    make_key,
    read_catalog,
    snapshot_directory,
    temp_config_file,
    write_source_tree,
)

__all__ = [
    "make_key",
    "read_catalog",
    "snapshot_directory",
    "temp_config_file",
    "write_source_tree",
]
