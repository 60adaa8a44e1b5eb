"""
Global test configuration fixtures for i18n extractor tests.

This module provides reusable pytest fixtures for creating ExtractConfig
instances and small project trees to run extractions against.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_extractor.config.schema import CatalogsConfig, ExtractConfig, SplittingConfig
from tests.utils.test_helpers import write_source_tree


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Create a small project with components, a feature folder and a dynamic route.

    Returns:
        Path: Root directory of the project
    """
    write_source_tree(
        tmp_path,
        {
            "src/App.vue": """
<template>
  <h1>{{ t("Welcome") }}</h1>
  <p>{{ t('Hello {name}, you have {count} messages') }}</p>
</template>
""",
            "src/features/auth/Login.vue": """
<script setup>
const title = t("Sign in to your account");
const attempts = t("{attempts, plural, one {# attempt} other {# attempts}} left");
const welcome = t("Welcome");
</script>
""",
            "src/features/dashboard/Home.js": """
export const header = () => t(`Today is {date, date, short}`);
export const dynamic = (key) => t(key);
""",
            "src/pages/employees/[id]/index.vue": """
<template><span>{{ t("Employee details") }}</span></template>
""",
            "src/locales/ignored.js": 'export const ignored = t("Never extracted");\n',
        },
    )
    return tmp_path


@pytest.fixture
def base_config() -> ExtractConfig:
    """
    Create a flat configuration with one source and one target locale.

    Returns:
        ExtractConfig: Configuration writing js catalogs to src/locales
    """
    return ExtractConfig(
        source_locale="en",
        locales=["en", "pt"],
        format="js",
        catalogs=CatalogsConfig(
            output_folder="src/locales",
            include=["src/**/*.{vue,js,ts}"],
            exclude=["src/locales/**/*"],
        ),
    )


@pytest.fixture
def feature_config(base_config: ExtractConfig) -> ExtractConfig:
    """
    Create a configuration splitting catalogs by feature folder.

    Returns:
        ExtractConfig: Configuration using the feature strategy
    """
    return base_config.model_copy(
        update={
            "header": "export default ",
            "splitting": SplittingConfig(strategy="feature"),
        }
    )


@pytest.fixture
def raw_config() -> dict[str, object]:
    """
    Create a configuration dictionary as it appears in a config file.

    Returns:
        dict[str, object]: camelCase configuration mapping
    """
    return {
        "sourceLocale": "en",
        "locales": ["en", "fr"],
        "format": "json",
        "catalogs": {
            "outputFolder": "locales",
            "include": ["src/**/*.js"],
            "exclude": ["**/node_modules/**"],
        },
        "splitting": {
            "strategy": "directory",
            "maxDepth": 2,
        },
    }
