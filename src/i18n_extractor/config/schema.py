"""Configuration schema for the i18n extractor using nested Pydantic models."""

import logging
import re
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, ImportString, field_validator, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

LOCALE_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

DEFAULT_HEADER = "module.exports="
DEFAULT_MIGRATION_HEADER = "export default"
DEFAULT_FEATURE_FOLDERS: tuple[str, ...] = (
    "features",
    "modules",
    "pages",
    "components",
    "views",
    "layouts",
    "composables",
)

OutputFormat = Literal["js", "json", "ts"]


def _validate_locale(value: str) -> str:
    if not LOCALE_PATTERN.match(value):
        raise ValueError(
            f'Invalid locale "{value}". Only alphanumeric characters, dashes, and underscores allowed.'
        )
    return value


class CatalogsConfig(BaseModel):
    """Where to scan for keys and where to write catalogs."""

    output_folder: str = Field(
        ...,
        description="Directory where locale files are generated",
        min_length=1,
    )
    include: list[str] = Field(
        ...,
        description="Glob patterns of source files to scan",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns of source files to skip",
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    @field_validator("output_folder")
    @classmethod
    def validate_output_folder(cls, v: str) -> str:
        """Reject output folders that climb out of the project."""
        if ".." in v:
            raise ValueError(
                "Path traversal detected in outputFolder. Use relative paths without '..'"
            )
        return v


class SplittingConfig(BaseModel):
    """How keys are partitioned into namespace files."""

    enabled: bool = Field(
        default=True,
        description="Whether splitting is active; disabled means a flat layout",
    )
    strategy: str = Field(
        default="flat",
        description="Namespace strategy: flat, directory, feature, file or custom",
    )
    base_dir: str | None = Field(
        default=None,
        description="Directory namespaces are computed relative to (default: project root)",
    )
    feature_folders: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FEATURE_FOLDERS),
        description="Folder names that mark feature boundaries",
    )
    max_depth: int = Field(
        default=3,
        ge=1,
        description="Maximum number of namespace segments",
    )
    custom_namespace: ImportString | None = Field(  # pyright: ignore[reportMissingTypeArgument]
        default=None,
        description="Namespace resolver, callable or 'module:attribute' import string",
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    @field_validator("custom_namespace")
    @classmethod
    def validate_custom_namespace(cls, v: object) -> object:
        """Make sure the custom namespace can actually be called."""
        if v is not None and not (callable(v) or callable(getattr(v, "resolve", None))):
            raise ValueError(
                f"customNamespace must be callable or provide resolve(), got {type(v).__name__}"
            )
        return v


class ExtractConfig(BaseModel):
    """
    Configuration model for one extraction run.

    Instances are immutable; every default is resolved at construction time.
    """

    source_locale: str = Field(
        ...,
        description="Locale whose catalog values equal the extracted messages",
        min_length=1,
    )
    locales: list[str] = Field(
        ...,
        description="All locales to generate catalogs for",
        min_length=1,
    )
    format: OutputFormat = Field(
        default="js",
        description="Output file format",
    )
    header: str | None = Field(
        default=None,
        description="Text placed before the object literal in js/ts catalogs",
    )
    catalogs: CatalogsConfig
    splitting: SplittingConfig | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    @field_validator("source_locale")
    @classmethod
    def validate_source_locale(cls, v: str) -> str:
        """Validate the source locale identifier."""
        return _validate_locale(v)

    @field_validator("locales")
    @classmethod
    def validate_locales(cls, v: list[str]) -> list[str]:
        """Validate every locale identifier."""
        return [_validate_locale(locale) for locale in v]

    @model_validator(mode="after")
    def check_source_locale_listed(self) -> "ExtractConfig":
        """Warn when the source locale gets no catalog of its own."""
        if self.source_locale not in self.locales:
            logger.warning(
                f"Source locale '{self.source_locale}' is not listed in locales; no source catalog will be generated"
            )
        return self

    @property
    def catalog_header(self) -> str:
        """Header used when rendering js/ts catalogs."""
        return self.header or DEFAULT_HEADER

    @property
    def migration_header(self) -> str:
        """Header used when rewriting merged catalogs during migration."""
        return self.header or DEFAULT_MIGRATION_HEADER

    @property
    def active_splitting(self) -> SplittingConfig | None:
        """Splitting configuration, or None when splitting is disabled."""
        if self.splitting is None or not self.splitting.enabled:
            return None
        return self.splitting

    @property
    def target_locales(self) -> list[str]:
        """Locales other than the source locale."""
        return [locale for locale in self.locales if locale != self.source_locale]
