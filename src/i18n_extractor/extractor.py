"""
Extraction orchestrator.

Runs the whole pipeline for one configuration: migrates catalog files with
unsafe names, scans the configured source files, merges the extracted keys,
assigns namespaces, and regenerates every (locale, namespace) catalog plus
the per-locale index. Files whose content would not change are not written,
so a run without source changes leaves the output folder untouched.

File operations are awaited one at a time over a sorted file list; the
output depends only on the source tree and the existing catalogs.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from pathlib import Path

from .config.manager import ConfigManager
from .config.schema import ExtractConfig
from .generators.catalog_generator import LOCALE_INDEX_EXPORT, CatalogGenerator
from .models import DEFAULT_NAMESPACE, ExtractedKey, ExtractionStats, MigrationRecord
from .parsers.catalog_parser import load_catalog
from .parsers.key_extractor import KeyExtractor
from .utils.core.exceptions import (
    CatalogLoadError,
    FileReadError,
    PathTraversalError,
    WriteError,
)
from .utils.file_scanner import resolve_source_files
from .utils.namespace import (
    INVALID_FILE_NAME_CHARS,
    NamespaceGenerator,
    drop_route_groups,
    sanitize_namespace,
)
from .utils.security import validate_path

logger = logging.getLogger(__name__)

CATALOG_EXTENSIONS = (".js", ".ts", ".json")


class Extractor:
    """Main extraction orchestrator."""

    def __init__(
        self,
        config: ExtractConfig | Mapping[str, object],
        root_dir: str | Path | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            config: Validated configuration, or a raw mapping to validate
            root_dir: Project root; paths in the configuration are relative
                to it (default: current working directory)

        Raises:
            ConfigurationError: If the configuration is invalid or the
                output folder lies outside the project root
        """
        self.config: ExtractConfig = ConfigManager.validate_config(config)
        self.root_dir: Path = Path(root_dir if root_dir is not None else Path.cwd()).resolve()
        self.output_folder: Path = validate_path(self.config.catalogs.output_folder, self.root_dir)

        self.key_extractor: KeyExtractor = KeyExtractor()
        self.catalog_generator: CatalogGenerator = CatalogGenerator(self.root_dir)
        self.namespace_generator: NamespaceGenerator = NamespaceGenerator.from_config(
            self.config.active_splitting, self.root_dir
        )

    def extract_sync(self, dry_run: bool = False) -> ExtractionStats:
        """Run ``extract`` to completion from synchronous code."""
        return asyncio.run(self.extract(dry_run=dry_run))

    async def extract(self, dry_run: bool = False) -> ExtractionStats:
        """
        Run the extraction.

        Args:
            dry_run: Compute everything but neither migrate nor write files;
                ``generated`` then counts files that would change

        Returns:
            Statistics of the run

        Raises:
            ConfigurationError: If a custom namespace resolver fails or an
                output path escapes the project root
            WriteError: If a catalog file cannot be written
        """
        stats = ExtractionStats()
        splitting = self.config.active_splitting

        logger.info("Initializing extraction...")
        logger.info(f"   Strategy: {splitting.strategy if splitting else 'flat'}")
        logger.info(f"   Source locale: {self.config.source_locale}")
        logger.info(f"   Target locales: {', '.join(self.config.target_locales)}")

        if dry_run:
            logger.info("DRY RUN: skipping file name migration")
        else:
            stats.migrations = await self.migrate_invalid_file_names()

        files = await asyncio.to_thread(
            resolve_source_files,
            self.config.catalogs.include,
            self.config.catalogs.exclude,
            self.root_dir,
        )
        logger.info(f"Scanning {len(files)} file(s)...")

        keys = await self.scan_files(files, stats)
        self.assign_namespaces(keys)
        self._log_key_summary(keys)

        namespaces = self.namespace_generator.get_namespaces(keys)
        grouped = self.namespace_generator.group_by_namespace(keys)
        aggregated = len(namespaces) > 1
        logger.info(f"   -> {len(namespaces)} namespace(s)")

        for locale in self.config.locales:
            for namespace in namespaces:
                await self.generate_catalog(
                    locale, namespace, grouped.get(namespace, []), aggregated, stats, dry_run
                )

        if aggregated:
            await self.generate_locale_index_files(namespaces, stats, dry_run)

        self._log_summary(stats)
        return stats

    async def scan_files(self, files: list[str], stats: ExtractionStats) -> list[ExtractedKey]:
        """
        Extract and merge the keys of all files.

        A file that cannot be read, or whose messages are all rejected, is
        skipped with a warning.

        Args:
            files: Sorted file paths relative to the project root
            stats: Statistics to update

        Returns:
            Merged keys sorted by key text
        """
        all_keys: list[ExtractedKey] = []

        for file in files:
            rejected_before = self.key_extractor.rejected_count
            try:
                safe_path = validate_path(file, self.root_dir)
                keys = await asyncio.to_thread(self.key_extractor.extract_from_file, safe_path)
            except (FileReadError, PathTraversalError) as e:
                stats.files_failed += 1
                logger.warning(f"Skipping {file}: {e}")
                continue

            stats.files_scanned += 1
            rejected = self.key_extractor.rejected_count - rejected_before
            stats.messages_rejected += rejected
            if rejected and not keys:
                stats.files_failed += 1
                logger.warning(f"Skipping {file}: all {rejected} message(s) rejected")
                continue

            all_keys = self.key_extractor.merge_keys(all_keys, keys)

        return all_keys

    def assign_namespaces(self, keys: list[ExtractedKey]) -> None:
        """
        Assign a namespace to every key.

        A key found in several files takes the namespace of the first file
        in sorted order.
        """
        for key in keys:
            key.namespace = (
                self.namespace_generator.generate(key.files[0]) if key.files else DEFAULT_NAMESPACE
            )

    def catalog_file_name(self, namespace: str, locale: str, aggregated: bool) -> str:
        """
        File name of a namespace catalog.

        When a locale index is generated it owns ``{locale}.{format}``, so the
        default namespace moves to ``{locale}.common.{format}``.
        """
        if aggregated and namespace == DEFAULT_NAMESPACE:
            return f"{locale}.{namespace}.{self.config.format}"
        return self.namespace_generator.get_file_name(namespace, locale, self.config.format)

    async def generate_catalog(
        self,
        locale: str,
        namespace: str,
        keys: list[ExtractedKey],
        aggregated: bool,
        stats: ExtractionStats,
        dry_run: bool = False,
    ) -> None:
        """Render and conditionally write the catalog of one locale and namespace."""
        file_name = self.catalog_file_name(namespace, locale, aggregated)
        output_path = validate_path(self.output_folder / file_name, self.root_dir)

        source_path = output_path
        if namespace == DEFAULT_NAMESPACE:
            source_path = await self.locate_common_catalog(locale, output_path, aggregated)

        existing = await self.load_existing_translations(source_path, locale, namespace)
        is_source_locale = locale == self.config.source_locale

        content = self.catalog_generator.generate(
            self.config.format,
            keys,
            existing,
            header=self.config.catalog_header,
            is_source_locale=is_source_locale,
        )

        if not is_source_locale:
            stats.preserved += sum(1 for key in keys if existing.get(key.key))

        if not await self.should_write_file(output_path, content):
            stats.skipped += 1
            logger.debug(f"Unchanged {file_name}")
            return

        if not dry_run:
            await self.write_file(output_path, content)
            if source_path != output_path and not aggregated:
                await asyncio.to_thread(source_path.unlink)
                logger.info(f"Moved {source_path.name} back to {file_name}")

        stats.generated += 1
        stats.total_keys += len(keys)

        new_keys = 0 if is_source_locale else sum(1 for key in keys if not existing.get(key.key))
        stats.new_keys += new_keys

        if new_keys:
            logger.info(f"Generated {file_name} ({len(existing)} existing, {new_keys} new)")
        else:
            logger.info(f"Generated {file_name}")

    async def locate_common_catalog(
        self, locale: str, output_path: Path, aggregated: bool
    ) -> Path:
        """
        Find the file holding the current translations of the default namespace.

        The default namespace lives in ``{locale}.{format}`` while it is the
        only namespace, and in ``{locale}.common.{format}`` once a locale index
        takes over ``{locale}.{format}``. When the layout changes between runs,
        the translations are read from the previous location.

        Args:
            locale: Locale identifier
            output_path: Path the catalog is written to in this run
            aggregated: Whether a locale index is generated in this run

        Returns:
            Path to load existing translations from
        """
        if output_path.exists() and not await self.is_locale_index(output_path):
            return output_path

        plain = self.output_folder / f"{locale}.{self.config.format}"
        nested = self.output_folder / f"{locale}.{DEFAULT_NAMESPACE}.{self.config.format}"
        previous = plain if aggregated else nested

        if previous == output_path or not previous.exists():
            return output_path
        if await self.is_locale_index(previous):
            return output_path

        logger.info(f"Carrying over translations from {previous.name} to {output_path.name}")
        return previous

    @staticmethod
    async def is_locale_index(file_path: Path) -> bool:
        """Check whether a file is a generated locale index rather than a catalog."""
        try:
            content = await asyncio.to_thread(file_path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return False
        return LOCALE_INDEX_EXPORT in content

    async def generate_locale_index_files(
        self, namespaces: list[str], stats: ExtractionStats, dry_run: bool = False
    ) -> None:
        """Render and conditionally write one index file per locale."""
        for locale in self.config.locales:
            index_name = f"{locale}.{self.config.format}"
            index_path = validate_path(self.output_folder / index_name, self.root_dir)

            content = self.catalog_generator.generate_locale_index(
                locale, namespaces, self.config.format
            )

            if not await self.should_write_file(index_path, content):
                stats.skipped += 1
                continue

            if not dry_run:
                await self.write_file(index_path, content)
            stats.generated += 1
            logger.info(f"Generated {index_name} (aggregates {len(namespaces)} namespaces)")

    async def load_existing_translations(
        self, file_path: Path, locale: str, namespace: str
    ) -> dict[str, str]:
        """
        Load the current content of a catalog file.

        Returns an empty mapping if the file does not exist or cannot be parsed.
        """
        if not file_path.exists():
            return {}

        try:
            return await asyncio.to_thread(load_catalog, file_path, self.config.header)
        except CatalogLoadError as e:
            logger.warning(f"Could not load existing translations for {locale}/{namespace}: {e}")
            return {}

    @staticmethod
    async def should_write_file(file_path: Path, content: str) -> bool:
        """Check whether the file is missing or its bytes differ from ``content``."""
        if not file_path.exists():
            return True

        try:
            current = await asyncio.to_thread(file_path.read_bytes)
        except OSError:
            return True
        return current != content.encode("utf-8")

    @staticmethod
    async def write_file(file_path: Path, content: str) -> None:
        """
        Write a generated file, creating its directory.

        Raises:
            WriteError: If the directory or file cannot be written
        """

        def _write() -> None:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            _ = file_path.write_text(content, encoding="utf-8", newline="")

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise WriteError(f"Failed to write {file_path}: {e}", context=str(file_path)) from e

    async def migrate_invalid_file_names(self) -> list[MigrationRecord]:
        """
        Rename catalog files whose names contain bracket characters.

        ``en.pages.employees.[id].js`` becomes ``en.pages.employees.id.js``.
        Route group segments are dropped, so ``en.pages.(auth).js`` becomes
        ``en.pages.js``.
        If the sanitized file already exists, both are merged with the
        sanitized file winning on conflicts, and the old file is removed.
        A failing migration is logged and skipped.

        Returns:
            The migrations that were performed
        """
        if not self.output_folder.is_dir():
            return []

        entries = await asyncio.to_thread(lambda: sorted(self.output_folder.iterdir()))
        records: list[MigrationRecord] = []

        for old_path in entries:
            old_name = old_path.name
            if not INVALID_FILE_NAME_CHARS.search(old_name):
                continue
            if old_path.suffix not in CATALOG_EXTENSIONS or not old_path.is_file():
                continue

            locale, _, rest = old_name.partition(".")
            raw_namespace = ".".join(drop_route_groups(rest[: -len(old_path.suffix)].split(".")))
            namespace = sanitize_namespace(raw_namespace)
            new_name = f"{locale}.{namespace}{old_path.suffix}" if namespace else f"{locale}{old_path.suffix}"
            new_path = self.output_folder / new_name

            if new_path == old_path:
                continue

            try:
                merged = await self._migrate_file(old_path, new_path)
            except (OSError, CatalogLoadError, WriteError) as e:
                logger.warning(f"Could not migrate {old_name}: {e}")
                continue

            records.append(MigrationRecord(old_name, new_name, merged))
            if merged:
                logger.info(f"Merged {old_name} -> {new_name} (duplicate resolved)")
            else:
                logger.info(f"Migrated {old_name} -> {new_name}")

        if records:
            logger.info(f"Migrated {len(records)} file(s) to sanitized names")

        return records

    async def _migrate_file(self, old_path: Path, new_path: Path) -> bool:
        """Move one catalog to its sanitized name; returns whether it was merged."""
        if not new_path.exists():
            _ = await asyncio.to_thread(old_path.rename, new_path)
            return False

        old_content = await asyncio.to_thread(load_catalog, old_path, self.config.header)
        new_content = await asyncio.to_thread(load_catalog, new_path, self.config.header)

        await self.write_translation_file(new_path, {**old_content, **new_content})
        await asyncio.to_thread(old_path.unlink)
        return True

    async def write_translation_file(self, file_path: Path, content: Mapping[str, str]) -> None:
        """Write a plain key/value mapping as a catalog file."""
        body = json.dumps(dict(content), indent=2, ensure_ascii=False)

        if file_path.suffix == ".json":
            text = f"{body}\n"
        else:
            text = f"{self.config.migration_header} {body};\n"

        await self.write_file(file_path, text)

    @staticmethod
    def _log_key_summary(keys: list[ExtractedKey]) -> None:
        logger.info(f"Found {len(keys)} unique key(s)")

        with_variables = sum(1 for key in keys if key.variables)
        with_plural = sum(1 for key in keys if key.has_plural)
        with_date = sum(1 for key in keys if key.has_date)

        if with_variables:
            logger.info(f"   -> {with_variables} with variables")
        if with_plural:
            logger.info(f"   -> {with_plural} with pluralization")
        if with_date:
            logger.info(f"   -> {with_date} with date formatting")

    @staticmethod
    def _log_summary(stats: ExtractionStats) -> None:
        logger.info("Extract complete!")
        logger.info(f"   {stats.generated} files generated")
        if stats.skipped:
            logger.info(f"   {stats.skipped} files unchanged (skipped)")
        if stats.preserved:
            logger.info(f"   {stats.preserved} existing translations preserved")
        if stats.new_keys:
            logger.warning(f"   {stats.new_keys} new keys need translation")
        if stats.files_failed:
            logger.warning(f"   {stats.files_failed} file(s) skipped")
