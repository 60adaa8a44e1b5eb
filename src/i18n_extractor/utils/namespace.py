"""
Namespace generation for splitting catalogs into multiple files.

A namespace is a dotted, lowercase name derived from the location of the
source file a key was found in, e.g. ``src/pages/auth/Login.vue`` becomes
``pages.auth`` under the ``directory`` strategy. Every catalog file is named
after its locale and namespace: ``en.pages.auth.js``.

Strategies:
    flat       every key goes to ``common``
    directory  containing directory relative to the base directory
    feature    folder following the first feature folder in the path
    file       directory plus the file's own name
    custom     a user supplied NamespaceResolver
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol, override, runtime_checkable

from ..config.schema import DEFAULT_FEATURE_FOLDERS, SplittingConfig
from ..models import DEFAULT_NAMESPACE, ExtractedKey
from .core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

STRATEGIES = ("flat", "directory", "feature", "file", "custom")

SOURCE_ROOT_SEGMENT = "src"
SOURCE_EXTENSIONS = re.compile(r"\.(vue|js|ts|jsx|tsx|svelte|astro|mjs|cjs)$")
INDEX_FILE_NAME = re.compile(r"^(index|default)$", re.IGNORECASE)
ROUTE_GROUP_SEGMENT = re.compile(r"^\(.*\)$")
DYNAMIC_SEGMENT = re.compile(r"\[[^\]]+\]")

# Characters that may never appear in a catalog file name
INVALID_FILE_NAME_CHARS = re.compile(r"[\[\](){}<>]")

_SANITIZE_STEPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\[id\]", re.IGNORECASE), "id"),
    (re.compile(r"\[slug\]", re.IGNORECASE), "slug"),
    (DYNAMIC_SEGMENT, "param"),
    (INVALID_FILE_NAME_CHARS, ""),
    (re.compile(r"[^A-Za-z0-9_.\-]"), "_"),
    (re.compile(r"_+"), "_"),
    (re.compile(r"\.+"), "."),
    (re.compile(r"^[._]+|[._]+$"), ""),
)


@runtime_checkable
class NamespaceResolver(Protocol):
    """Computes the namespace for a source file."""

    def resolve(self, file_path: str, base_dir: str) -> str | None:
        """
        Resolve the namespace of a file.

        Args:
            file_path: Absolute path of the source file
            base_dir: Base directory of the project

        Returns:
            Raw namespace, or a falsy value for the default namespace
        """
        ...


class CallableNamespaceResolver:
    """Adapts a plain ``(file_path, base_dir) -> namespace`` function."""

    def __init__(self, func: Callable[[str, str], str | None]) -> None:
        self.func: Callable[[str, str], str | None] = func

    def resolve(self, file_path: str, base_dir: str) -> str | None:
        return self.func(file_path, base_dir)

    @override
    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", repr(self.func))
        return f"CallableNamespaceResolver({name})"


def as_resolver(value: object) -> NamespaceResolver:
    """
    Turn a resolver-like object into a NamespaceResolver.

    Args:
        value: Object with a ``resolve`` method or a plain callable

    Returns:
        A NamespaceResolver

    Raises:
        ConfigurationError: If the value is neither
    """
    if isinstance(value, NamespaceResolver):
        return value
    if callable(value):
        return CallableNamespaceResolver(value)  # pyright: ignore[reportUnknownArgumentType]
    raise ConfigurationError(
        f"Custom namespace must be callable or provide resolve(), got {type(value).__name__}"
    )


def drop_route_groups(segments: Iterable[str]) -> list[str]:
    """Remove ``(group)`` route segments."""
    return [segment for segment in segments if not ROUTE_GROUP_SEGMENT.match(segment)]


def sanitize_namespace(namespace: str) -> str:
    """
    Make a raw namespace safe for use in file names.

    ``[id]`` and ``[slug]`` become ``id`` and ``slug``, any other bracketed
    segment becomes ``param``, remaining brackets are dropped and every other
    unsafe character becomes ``_``.

    Args:
        namespace: Raw namespace, e.g. ``pages.employees.[id]``

    Returns:
        Sanitized lowercase namespace, e.g. ``pages.employees.id``
    """
    sanitized = namespace
    for pattern, replacement in _SANITIZE_STEPS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized.lower()


class NamespaceGenerator:
    """Generates namespaces from file paths using a configurable strategy."""

    def __init__(
        self,
        strategy: str = "flat",
        base_dir: str | Path | None = None,
        feature_folders: Iterable[str] | None = None,
        max_depth: int = 3,
        resolver: NamespaceResolver | None = None,
    ) -> None:
        """
        Initialize the namespace generator.

        Args:
            strategy: One of ``STRATEGIES``; anything else falls back to flat
            base_dir: Directory paths are made relative to (default: cwd)
            feature_folders: Folder names marking feature boundaries
            max_depth: Maximum number of namespace segments
            resolver: Resolver used by the custom strategy
        """
        self.strategy: str = strategy
        self.base_dir: Path = Path(base_dir) if base_dir is not None else Path.cwd()
        self.feature_folders: tuple[str, ...] = (
            tuple(feature_folders)
            if feature_folders is not None
            else DEFAULT_FEATURE_FOLDERS
        )
        self.max_depth: int = max_depth
        self.resolver: NamespaceResolver | None = resolver

        if strategy not in STRATEGIES:
            logger.warning(f"Unknown splitting strategy: '{strategy}'. Using 'flat' instead.")

    @classmethod
    def from_config(
        cls, splitting: SplittingConfig | None, root_dir: Path
    ) -> NamespaceGenerator:
        """
        Create a generator from the splitting section of the configuration.

        Args:
            splitting: Splitting configuration, or None for a flat layout
            root_dir: Project root, used when no base directory is configured

        Returns:
            Configured NamespaceGenerator
        """
        if splitting is None:
            return cls(strategy="flat", base_dir=root_dir)

        base_dir = root_dir / splitting.base_dir if splitting.base_dir else root_dir
        resolver = (
            as_resolver(splitting.custom_namespace)
            if splitting.custom_namespace is not None
            else None
        )
        return cls(
            strategy=splitting.strategy,
            base_dir=base_dir,
            feature_folders=splitting.feature_folders,
            max_depth=splitting.max_depth,
            resolver=resolver,
        )

    @property
    def is_flat(self) -> bool:
        """Whether every key ends up in the default namespace."""
        return self.strategy not in STRATEGIES or self.strategy == "flat"

    def generate(self, file_path: str | Path) -> str:
        """
        Generate the namespace for a file.

        Args:
            file_path: Path of the source file

        Returns:
            Sanitized namespace, e.g. ``pages.auth`` or ``common``
        """
        path = str(file_path)

        match self.strategy:
            case "flat":
                namespace = DEFAULT_NAMESPACE
            case "directory":
                namespace = self.generate_from_directory(path)
            case "feature":
                namespace = self.generate_from_feature(path)
            case "file":
                namespace = self.generate_from_file(path)
            case "custom":
                namespace = self.generate_custom(path)
            case _:
                namespace = DEFAULT_NAMESPACE

        return sanitize_namespace(namespace) or DEFAULT_NAMESPACE

    def _relative_parts(self, file_path: str) -> list[str]:
        """Split a path relative to the base directory into its segments."""
        relative = os.path.relpath(Path(file_path).resolve(), self.base_dir.resolve())
        return list(Path(relative).parts)

    @staticmethod
    def _directory_parts(parts: list[str]) -> list[str]:
        """Drop the source root prefix and route group segments."""
        if parts and parts[0] == SOURCE_ROOT_SEGMENT:
            parts = parts[1:]
        return drop_route_groups(parts)

    def generate_from_directory(self, file_path: str) -> str:
        """
        Namespace from the containing directory.

        Example: ``src/pages/auth/Login.vue`` -> ``pages.auth``
        """
        parts = self._relative_parts(file_path)[:-1]
        namespace = ".".join(self._directory_parts(parts)[: self.max_depth])
        return namespace or DEFAULT_NAMESPACE

    def generate_from_feature(self, file_path: str) -> str:
        """
        Namespace from the folder following the first feature folder.

        Example: ``src/features/auth/Login.vue`` -> ``auth``
        """
        parts = self._relative_parts(file_path)

        for index, part in enumerate(parts[:-1]):
            if part not in self.feature_folders:
                continue
            feature = parts[index + 1]
            if index + 1 == len(parts) - 1:
                feature = SOURCE_EXTENSIONS.sub("", feature)
            return DYNAMIC_SEGMENT.sub("", feature)

        return self.generate_from_directory(file_path)

    def generate_from_file(self, file_path: str) -> str:
        """
        Namespace from the directory and the file name.

        Example: ``src/pages/products/Detail.vue`` -> ``pages.products.detail``
        """
        parts = self._relative_parts(file_path)
        file_name = SOURCE_EXTENSIONS.sub("", parts[-1]) if parts else ""

        namespace_parts = self._directory_parts(parts[:-1])[: self.max_depth]
        if file_name and not INDEX_FILE_NAME.match(file_name):
            namespace_parts.append(file_name)

        namespace = ".".join(namespace_parts[: self.max_depth])
        return namespace or DEFAULT_NAMESPACE

    def generate_custom(self, file_path: str) -> str:
        """Namespace from the configured resolver."""
        if self.resolver is None:
            return DEFAULT_NAMESPACE

        try:
            result = self.resolver.resolve(file_path, str(self.base_dir))
        except Exception as e:
            raise ConfigurationError(
                f"Custom namespace resolver failed for {file_path}: {e}",
                context=file_path,
            ) from e

        if not result:
            return DEFAULT_NAMESPACE
        if not isinstance(result, str):
            raise ConfigurationError(
                f"Custom namespace resolver returned {type(result).__name__} for {file_path}, expected str",
                context=file_path,
            )
        return result

    @staticmethod
    def get_namespaces(keys: Iterable[ExtractedKey]) -> list[str]:
        """Return the sorted unique namespaces of the keys."""
        return sorted({key.resolved_namespace for key in keys})

    @staticmethod
    def group_by_namespace(keys: Iterable[ExtractedKey]) -> dict[str, list[ExtractedKey]]:
        """
        Group keys by namespace.

        Args:
            keys: Keys with assigned namespaces

        Returns:
            Mapping of namespace to keys sorted by key text
        """
        grouped: dict[str, list[ExtractedKey]] = {}
        for key in keys:
            grouped.setdefault(key.resolved_namespace, []).append(key)

        for namespace_keys in grouped.values():
            namespace_keys.sort(key=lambda k: k.key)

        return grouped

    def get_file_name(self, namespace: str, locale: str, file_format: str) -> str:
        """
        Build the catalog file name for a namespace.

        Args:
            namespace: Sanitized namespace
            locale: Locale identifier
            file_format: Output format (js, ts or json)

        Returns:
            ``{locale}.{format}`` for the default namespace or a flat layout,
            ``{locale}.{namespace}.{format}`` otherwise
        """
        if namespace == DEFAULT_NAMESPACE or self.is_flat:
            return f"{locale}.{file_format}"
        return f"{locale}.{namespace}.{file_format}"
