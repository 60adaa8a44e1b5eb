"""Tests for namespace generation strategies."""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_extractor.config.schema import SplittingConfig
from i18n_extractor.utils.core.exceptions import ConfigurationError
from i18n_extractor.utils.namespace import (
    CallableNamespaceResolver,
    NamespaceGenerator,
    NamespaceResolver,
    as_resolver,
    drop_route_groups,
    sanitize_namespace,
)
from tests.utils.test_helpers import make_key


def uppercase_first_segment(file_path: str, base_dir: str) -> str:
    """Resolver used by the import string tests."""
    relative = Path(file_path).relative_to(base_dir)
    return relative.parts[0].upper()


class TestSanitizeNamespace:
    """Test cases for making namespaces file-name safe."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("pages.employees.[id]", "pages.employees.id"),
            ("blog.[slug]", "blog.slug"),
            ("shop.[category]", "shop.param"),
            ("shop.[...all]", "shop.param"),
            ("Pages.Auth", "pages.auth"),
            ("weird name!", "weird_name"),
            ("a..b", "a.b"),
            ("a__b", "a_b"),
            (".leading.", "leading"),
            ("(marketing).about", "marketing.about"),
            ("<script>", "script"),
            ("[]", ""),
        ],
    )
    def test_sanitize(self, raw: str, expected: str) -> None:
        """Test each sanitization step."""
        assert sanitize_namespace(raw) == expected

    @pytest.mark.parametrize("raw", ["a/[b]", "x.{y}", "(g)", "<>", "ok.name"])
    def test_result_is_safe(self, raw: str) -> None:
        """Test that no bracket characters survive."""
        result = sanitize_namespace(raw)

        assert not any(char in result for char in "[](){}<>")
        assert result == result.lower()

    def test_drop_route_groups(self) -> None:
        """Test that only whole (group) segments are removed."""
        assert drop_route_groups(["pages", "(auth)", "login", "a(b)"]) == ["pages", "login", "a(b)"]


class TestNamespaceStrategies:
    """Test cases for each splitting strategy."""

    def test_flat(self, tmp_path: Path) -> None:
        """Test that flat puts everything in common."""
        generator = NamespaceGenerator(strategy="flat", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/pages/auth/Login.vue") == "common"
        assert generator.is_flat

    def test_directory(self, tmp_path: Path) -> None:
        """Test the containing directory strategy."""
        generator = NamespaceGenerator(strategy="directory", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/pages/auth/Login.vue") == "pages.auth"
        assert generator.generate(tmp_path / "src/App.vue") == "common"
        assert generator.generate(tmp_path / "lib/util.js") == "lib"

    def test_directory_max_depth(self, tmp_path: Path) -> None:
        """Test that deep paths are truncated."""
        generator = NamespaceGenerator(strategy="directory", base_dir=tmp_path, max_depth=2)

        assert generator.generate(tmp_path / "src/a/b/c/d/File.vue") == "a.b"

    def test_directory_dynamic_and_group_segments(self, tmp_path: Path) -> None:
        """Test route-style dynamic and group folders."""
        generator = NamespaceGenerator(strategy="directory", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/pages/employees/[id]/index.vue") == "pages.employees.id"
        assert generator.generate(tmp_path / "src/(marketing)/about/Page.vue") == "about"

    def test_directory_relative_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that relative file paths are resolved from the working directory."""
        monkeypatch.chdir(tmp_path)
        generator = NamespaceGenerator(strategy="directory", base_dir=tmp_path)

        assert generator.generate("src/pages/auth/Login.vue") == "pages.auth"

    def test_feature(self, tmp_path: Path) -> None:
        """Test the feature folder strategy."""
        generator = NamespaceGenerator(strategy="feature", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/features/auth/components/Form.vue") == "auth"
        assert generator.generate(tmp_path / "src/modules/billing/index.ts") == "billing"
        assert generator.generate(tmp_path / "src/views/Settings.vue") == "settings"
        assert generator.generate(tmp_path / "src/pages/[id]/Detail.vue") == "common"

    def test_feature_fallback_to_directory(self, tmp_path: Path) -> None:
        """Test paths without any feature folder."""
        generator = NamespaceGenerator(strategy="feature", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/lib/format/date.ts") == "lib.format"

    def test_feature_custom_folders(self, tmp_path: Path) -> None:
        """Test configured feature folder names."""
        generator = NamespaceGenerator(
            strategy="feature", base_dir=tmp_path, feature_folders=["domains"]
        )

        assert generator.generate(tmp_path / "src/domains/orders/List.vue") == "orders"
        assert generator.generate(tmp_path / "src/features/auth/Login.vue") == "features.auth"

    def test_file(self, tmp_path: Path) -> None:
        """Test the directory plus file name strategy."""
        generator = NamespaceGenerator(strategy="file", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/pages/products/Detail.vue") == "pages.products.detail"
        assert generator.generate(tmp_path / "src/pages/products/index.vue") == "pages.products"
        assert generator.generate(tmp_path / "src/App.vue") == "app"

    def test_file_respects_max_depth(self, tmp_path: Path) -> None:
        """Test that the file name counts toward the depth limit."""
        generator = NamespaceGenerator(strategy="file", base_dir=tmp_path, max_depth=2)

        assert generator.generate(tmp_path / "src/pages/products/Detail.vue") == "pages.products"

    def test_unknown_strategy_falls_back_to_flat(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that an unknown strategy warns and behaves as flat."""
        generator = NamespaceGenerator(strategy="by-color", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/pages/auth/Login.vue") == "common"
        assert generator.is_flat
        assert "Unknown splitting strategy" in caplog.text

    @pytest.mark.parametrize("strategy", ["flat", "directory", "feature", "file"])
    def test_namespace_never_contains_brackets(self, tmp_path: Path, strategy: str) -> None:
        """Test generated namespaces for awkward paths."""
        generator = NamespaceGenerator(strategy=strategy, base_dir=tmp_path)
        paths = [
            "src/pages/[id]/index.vue",
            "src/(auth)/login/[...rest].vue",
            "src/features/{weird}/<x>.vue",
        ]

        for path in paths:
            namespace = generator.generate(tmp_path / path)
            assert namespace
            assert not any(char in namespace for char in "[](){}<>")


class TestCustomStrategy:
    """Test cases for user supplied resolvers."""

    def test_callable_resolver(self, tmp_path: Path) -> None:
        """Test a plain function resolver."""
        generator = NamespaceGenerator(
            strategy="custom",
            base_dir=tmp_path,
            resolver=as_resolver(uppercase_first_segment),
        )

        assert generator.generate(tmp_path / "src/App.vue") == "src"

    def test_object_resolver(self, tmp_path: Path) -> None:
        """Test an object implementing resolve()."""

        class FixedResolver:
            def resolve(self, file_path: str, base_dir: str) -> str | None:
                return "shop.[id]" if "shop" in file_path else None

        resolver = as_resolver(FixedResolver())
        generator = NamespaceGenerator(strategy="custom", base_dir=tmp_path, resolver=resolver)

        assert isinstance(resolver, NamespaceResolver)
        assert generator.generate(tmp_path / "src/shop/Cart.vue") == "shop.id"
        assert generator.generate(tmp_path / "src/App.vue") == "common"

    def test_missing_resolver_is_common(self, tmp_path: Path) -> None:
        """Test the custom strategy without a resolver."""
        generator = NamespaceGenerator(strategy="custom", base_dir=tmp_path)

        assert generator.generate(tmp_path / "src/App.vue") == "common"

    def test_failing_resolver_raises(self, tmp_path: Path) -> None:
        """Test that resolver errors abort with a configuration error."""

        def broken(file_path: str, base_dir: str) -> str:
            raise RuntimeError("boom")

        generator = NamespaceGenerator(
            strategy="custom", base_dir=tmp_path, resolver=as_resolver(broken)
        )

        with pytest.raises(ConfigurationError, match="boom"):
            _ = generator.generate(tmp_path / "src/App.vue")

    def test_non_string_result_raises(self, tmp_path: Path) -> None:
        """Test that a resolver returning a Path is rejected as a configuration error."""

        def path_resolver(file_path: str, base_dir: str) -> Path:
            return Path("pages")

        generator = NamespaceGenerator(
            strategy="custom", base_dir=tmp_path, resolver=as_resolver(path_resolver)
        )

        with pytest.raises(ConfigurationError, match="expected str"):
            _ = generator.generate(tmp_path / "src/App.vue")

    def test_as_resolver_rejects_non_callables(self) -> None:
        """Test that invalid resolver values are rejected."""
        with pytest.raises(ConfigurationError):
            _ = as_resolver(42)

    def test_callable_adapter_repr(self) -> None:
        """Test the adapter's representation."""
        adapter = CallableNamespaceResolver(uppercase_first_segment)

        assert "uppercase_first_segment" in repr(adapter)

    def test_from_config_import_string(self, tmp_path: Path) -> None:
        """Test a resolver configured as an import string."""
        splitting = SplittingConfig(
            strategy="custom",
            custom_namespace=f"{__name__}:uppercase_first_segment",
        )
        generator = NamespaceGenerator.from_config(splitting, tmp_path)

        assert generator.generate(tmp_path / "pages/Home.vue") == "pages"


class TestFromConfig:
    """Test cases for building generators from configuration."""

    def test_none_is_flat(self, tmp_path: Path) -> None:
        """Test that a missing splitting section means flat."""
        generator = NamespaceGenerator.from_config(None, tmp_path)

        assert generator.is_flat
        assert generator.base_dir == tmp_path

    def test_base_dir_relative_to_root(self, tmp_path: Path) -> None:
        """Test that baseDir is resolved against the project root."""
        splitting = SplittingConfig(strategy="directory", base_dir="src", max_depth=1)
        generator = NamespaceGenerator.from_config(splitting, tmp_path)

        assert generator.base_dir == tmp_path / "src"
        assert generator.max_depth == 1
        assert generator.generate(tmp_path / "src/pages/auth/Login.vue") == "pages"


class TestGrouping:
    """Test cases for namespace grouping helpers."""

    def test_get_namespaces_sorted_unique(self) -> None:
        """Test that namespaces are deduplicated and sorted."""
        keys = [
            make_key("a", namespace="pages"),
            make_key("b", namespace="auth"),
            make_key("c", namespace="pages"),
            make_key("d"),
        ]

        assert NamespaceGenerator.get_namespaces(keys) == ["auth", "common", "pages"]

    def test_group_by_namespace_sorts_keys(self) -> None:
        """Test that keys inside a namespace are sorted by text."""
        keys = [make_key("b", namespace="x"), make_key("a", namespace="x")]

        grouped = NamespaceGenerator.group_by_namespace(keys)

        assert [k.key for k in grouped["x"]] == ["a", "b"]

    def test_get_file_name(self, tmp_path: Path) -> None:
        """Test catalog file naming."""
        flat = NamespaceGenerator(strategy="flat", base_dir=tmp_path)
        split = NamespaceGenerator(strategy="directory", base_dir=tmp_path)

        assert flat.get_file_name("pages", "en", "js") == "en.js"
        assert split.get_file_name("common", "en", "js") == "en.js"
        assert split.get_file_name("pages.auth", "pt-BR", "json") == "pt-BR.pages.auth.json"
