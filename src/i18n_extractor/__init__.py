"""
i18n extractor - scans source files for ``t("...")`` calls and regenerates
per-locale translation catalogs while preserving existing translations.
"""

from .config.manager import ConfigManager
from .config.schema import CatalogsConfig, ExtractConfig, SplittingConfig
from .extractor import Extractor
from .models import ExtractedKey, ExtractionStats
from .utils.namespace import NamespaceResolver

__all__ = [
    "CatalogsConfig",
    "ConfigManager",
    "ExtractConfig",
    "ExtractedKey",
    "ExtractionStats",
    "Extractor",
    "NamespaceResolver",
    "SplittingConfig",
]
