"""
Catalog file rendering.

Renders the keys of one (locale, namespace) pair into JS/TS module text or
JSON, and renders the per-locale index module that merges every namespace
file of a locale into one flat object. Output depends only on its inputs:
keys are grouped by the files they appear in, groups and keys are sorted,
and file paths are shown relative to the project root with forward slashes,
so the same source tree renders byte-identical catalogs on every machine.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path, PurePath

from ..config.schema import DEFAULT_HEADER
from ..models import ExtractedKey
from ..utils.security import escape_string, sanitize_variable_name

logger = logging.getLogger(__name__)

FILE_GROUP_SEPARATOR = " | "
LOCALE_INDEX_EXPORT = "export default messages;"

RESERVED_IDENTIFIERS = frozenset(
    {
        "break", "case", "catch", "class", "const", "continue", "debugger",
        "default", "delete", "do", "else", "enum", "export", "extends", "false",
        "finally", "for", "function", "if", "import", "in", "instanceof", "let",
        "new", "null", "return", "static", "super", "switch", "this", "throw",
        "true", "try", "typeof", "var", "void", "while", "with", "yield",
        "messages",
    }
)


class CatalogGenerator:
    """Generates catalog file content in js, ts or json format."""

    def __init__(self, root_dir: str | Path | None = None) -> None:
        """
        Initialize the catalog generator.

        Args:
            root_dir: Project root file paths are shown relative to (default: cwd)
        """
        self.root_dir: Path = Path(root_dir) if root_dir is not None else Path.cwd()

    def display_path(self, file_path: str) -> str:
        """
        Normalize a file path for display in a catalog.

        Args:
            file_path: Absolute or root-relative path

        Returns:
            Root-relative path using forward slashes
        """
        path = PurePath(file_path)
        if path.is_absolute():
            relative = os.path.relpath(path, self.root_dir.resolve())
        else:
            relative = str(path)
        return relative.replace(os.sep, "/").replace("\\", "/")

    def group_keys_by_file(
        self, keys: Iterable[ExtractedKey]
    ) -> dict[str, list[ExtractedKey]]:
        """
        Group keys by the set of files they appear in.

        Args:
            keys: Keys to group

        Returns:
            Mapping of file group label (``"a.js | b.js"``) to keys, with
            labels and keys within each group sorted
        """
        grouped: dict[str, list[ExtractedKey]] = {}

        for key in keys:
            label = FILE_GROUP_SEPARATOR.join(
                sorted({self.display_path(file) for file in key.files})
            )
            grouped.setdefault(label, []).append(key)

        return {
            label: sorted(grouped[label], key=lambda k: k.key)
            for label in sorted(grouped)
        }

    @staticmethod
    def resolve_value(
        key: ExtractedKey, existing_translations: Mapping[str, object], is_source_locale: bool
    ) -> str:
        """
        Pick the catalog value for a key.

        The source locale shows the message itself; other locales keep a
        previously saved translation or get an empty string.
        """
        if is_source_locale:
            return key.message

        existing = existing_translations.get(key.key)
        if isinstance(existing, str) and existing:
            return existing
        return ""

    def _ordered_keys(self, keys: Iterable[ExtractedKey]) -> list[ExtractedKey]:
        """Flatten keys in file-group order."""
        return [key for group in self.group_keys_by_file(keys).values() for key in group]

    def generate_js(
        self,
        keys: Iterable[ExtractedKey],
        existing_translations: Mapping[str, object] | None = None,
        header: str = DEFAULT_HEADER,
        is_source_locale: bool = False,
    ) -> str:
        """
        Generate a JavaScript or TypeScript catalog module.

        Args:
            keys: Keys of one namespace
            existing_translations: Translations to preserve
            header: Text placed before the object literal
            is_source_locale: Whether this is the source locale

        Returns:
            Module source text
        """
        existing = existing_translations or {}
        output = f"{header}{{\n"

        for label, group in self.group_keys_by_file(keys).items():
            output += f"  /*\n   {label.replace('*/', '* /')}\n  */\n"

            for key in group:
                if key.variables:
                    output += f"  // Variables: {', '.join(key.variables)}\n"
                if key.has_plural:
                    output += "  // Uses pluralization\n"
                if key.has_date:
                    output += "  // Uses date formatting\n"

                safe_key = escape_string(key.key)
                value = escape_string(self.resolve_value(key, existing, is_source_locale))
                output += f'  "{safe_key}": "{value}",\n'

            output += "\n"

        if output.endswith(",\n\n"):
            output = output[: -len(",\n\n")] + "\n"
        output += "};\n"

        return output

    def generate_ts(
        self,
        keys: Iterable[ExtractedKey],
        existing_translations: Mapping[str, object] | None = None,
        header: str = DEFAULT_HEADER,
        is_source_locale: bool = False,
    ) -> str:
        """Generate a TypeScript catalog module; same shape as ``generate_js``."""
        return self.generate_js(keys, existing_translations, header, is_source_locale)

    def generate_json(
        self,
        keys: Iterable[ExtractedKey],
        existing_translations: Mapping[str, object] | None = None,
        is_source_locale: bool = False,
    ) -> str:
        """
        Generate a JSON catalog.

        Keys are emitted in the same order as the js renderer emits them.

        Args:
            keys: Keys of one namespace
            existing_translations: Translations to preserve
            is_source_locale: Whether this is the source locale

        Returns:
            JSON text with 2-space indentation
        """
        existing = existing_translations or {}
        translations = {
            key.key: self.resolve_value(key, existing, is_source_locale)
            for key in self._ordered_keys(keys)
        }
        return json.dumps(translations, indent=2, ensure_ascii=False)

    def generate(
        self,
        file_format: str,
        keys: Iterable[ExtractedKey],
        existing_translations: Mapping[str, object] | None = None,
        header: str = DEFAULT_HEADER,
        is_source_locale: bool = False,
    ) -> str:
        """Render a catalog in the given output format."""
        match file_format:
            case "json":
                return self.generate_json(keys, existing_translations, is_source_locale)
            case "ts":
                return self.generate_ts(keys, existing_translations, header, is_source_locale)
            case _:
                return self.generate_js(keys, existing_translations, header, is_source_locale)

    @staticmethod
    def import_binding(namespace: str, taken: set[str]) -> str:
        """
        Derive a unique import identifier for a namespace.

        Args:
            namespace: Sanitized namespace, e.g. ``pages.auth``
            taken: Identifiers already in use; the result is added to it

        Returns:
            Identifier such as ``pages_auth``
        """
        binding = sanitize_variable_name(namespace.replace("-", "_").replace(".", "_"))
        if binding in RESERVED_IDENTIFIERS:
            binding = f"_{binding}"

        candidate = binding
        suffix = 2
        while candidate in taken:
            candidate = f"{binding}_{suffix}"
            suffix += 1

        taken.add(candidate)
        return candidate

    def generate_locale_index(
        self, locale: str, namespaces: Iterable[str], file_format: str
    ) -> str:
        """
        Generate the index module that merges all namespaces of a locale.

        Args:
            locale: Locale identifier
            namespaces: Namespaces of the locale
            file_format: Output format of the namespace files

        Returns:
            Module text importing every namespace file and default-exporting
            their shallow merge
        """
        extension = ".json" if file_format == "json" else ""
        taken: set[str] = set()
        imports: list[str] = []
        spreads: list[str] = []

        for namespace in sorted(namespaces):
            binding = self.import_binding(namespace, taken)
            imports.append(f"import {binding} from './{locale}.{namespace}{extension}';")
            spreads.append(f"  ...{binding},")

        logger.debug(f"Rendered {locale} index with {len(imports)} namespace import(s)")
        return (
            "\n".join(imports)
            + "\n\nconst messages = {\n"
            + "\n".join(spreads)
            + f"\n}};\n\n{LOCALE_INDEX_EXPORT}\n"
        )
