"""Configuration manager for the i18n extractor.

This module provides functionality for discovering, loading and validating
extractor configuration files (YAML or JSON) with Pydantic model validation.
"""

import logging
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..utils.core.exceptions import ConfigurationError
from .schema import ExtractConfig


logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES: tuple[str, ...] = (
    "i18nExtractor.yml",
    "i18nExtractor.yaml",
    "i18nExtractor.json",
)


def _format_validation_error(error: ValidationError) -> str:
    """Flatten a Pydantic validation error into one readable line."""
    problems: list[str] = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "config"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


class ConfigManager:
    """
    Configuration manager for extractor config files.

    All methods are static: a configuration is an immutable value that is
    loaded once per extraction run.
    """

    @staticmethod
    def find_config_file(directory: Path) -> Path | None:
        """
        Look for a configuration file in a directory.

        Args:
            directory: Directory to search, usually the project root

        Returns:
            Path of the first existing config file, or None
        """
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def load_config(config_path: Path, root_dir: Path | None = None) -> ExtractConfig:
        """
        Load and validate configuration from a YAML or JSON file.

        Args:
            config_path: Path to the configuration file
            root_dir: Project root the file must be located in (default: cwd)

        Returns:
            ExtractConfig: Validated configuration object

        Raises:
            ConfigurationError: If the file is missing, outside the project
                root, unparsable, or fails validation
        """
        root = (root_dir or Path.cwd()).resolve()
        resolved = config_path.resolve()

        if not resolved.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        if resolved.parent != root:
            raise ConfigurationError(
                "Configuration file must be in the project root directory",
                context=str(config_path),
            )

        if resolved.suffix not in (".yml", ".yaml", ".json"):
            raise ConfigurationError(f"Unsupported config file type: {resolved.suffix}")

        try:
            with resolved.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid syntax in {config_path}: {e}") from e

        if not isinstance(raw_config_data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping, got {type(raw_config_data).__name__}"
            )

        logger.debug(f"Loaded configuration from {config_path}")
        return ConfigManager.validate_config(raw_config_data)  # pyright: ignore[reportUnknownArgumentType]

    @staticmethod
    def validate_config(config: ExtractConfig | Mapping[str, object]) -> ExtractConfig:
        """
        Validate a configuration object.

        Args:
            config: Already validated configuration, or a raw mapping

        Returns:
            ExtractConfig: Validated configuration

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        if isinstance(config, ExtractConfig):
            return config

        if not isinstance(config, Mapping):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(config).__name__}"
            )

        try:
            return ExtractConfig.model_validate(dict(config))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration: {_format_validation_error(e)}", context=e
            ) from e

    @staticmethod
    def build_config(**values: object) -> ExtractConfig:
        """
        Build a configuration from keyword arguments.

        Field names or their camelCase aliases are accepted; omitted optional
        fields take their defaults.

        Raises:
            ConfigurationError: If the values are invalid
        """
        return ConfigManager.validate_config(values)
