"""
Command-line interface for extracting translation keys into locale catalogs.

Looks for ``i18nExtractor.yml``, ``i18nExtractor.yaml`` or
``i18nExtractor.json`` in the project root, scans the configured source
files for ``t("...")`` calls and regenerates the catalogs.

Usage Examples:
    Extract using the config in the current directory:
        i18n-extract

    Use an explicit config file:
        i18n-extract --config i18nExtractor.json

    Verify in CI that catalogs are up to date:
        i18n-extract --check --ci-mode
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple

from .config.manager import CONFIG_FILE_NAMES, ConfigManager
from .extractor import Extractor
from .utils.core.exceptions import ExtractorError


class ExtractArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    config: Path | None
    root: Path
    verbose: bool
    ci_mode: bool
    check: bool


def setup_logging(verbose: bool = False, ci_mode: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
        ci_mode: Use compact output suited for CI logs
    """
    level = logging.DEBUG if verbose else logging.INFO

    if ci_mode:
        logging.basicConfig(
            level=level,
            format="::%(levelname)s::%(message)s" if verbose else "%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def parse_arguments(argv: Sequence[str] | None = None) -> ExtractArgs:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments to parse (default: sys.argv)

    Returns:
        Parsed arguments in a type-safe container
    """
    parser = argparse.ArgumentParser(
        prog="i18n-extract",
        description="Extract translation keys from source files into locale catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                # Use the config in the current directory
  %(prog)s --config i18nExtractor.json    # Use an explicit config file
  %(prog)s --check                        # Fail if catalogs are out of date
        """,
    )

    _ = parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Configuration file (default: first of {', '.join(CONFIG_FILE_NAMES)})",
    )

    _ = parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root directory (default: current directory)",
    )

    _ = parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )

    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        help="Enable CI/CD mode with compact logging",
    )

    _ = parser.add_argument(
        "--check",
        action="store_true",
        help="Check mode: do not write anything, exit 1 if catalogs would change",
    )

    args = parser.parse_args(argv)

    return ExtractArgs(
        config=args.config,  # pyright: ignore[reportAny]
        root=args.root,  # pyright: ignore[reportAny]
        verbose=args.verbose,  # pyright: ignore[reportAny]
        ci_mode=args.ci_mode,  # pyright: ignore[reportAny]
        check=args.check,  # pyright: ignore[reportAny]
    )


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the extraction command.

    Returns:
        Exit code (0 for success, 1 for error or outdated catalogs in check mode)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.ci_mode)
    logger = logging.getLogger(__name__)

    root = args.root.resolve()
    if not root.is_dir():
        logger.error(f"Project root is not a directory: {args.root}")
        return 1

    config_path = args.config if args.config is not None else ConfigManager.find_config_file(root)
    if config_path is None:
        logger.error(
            f"You must have a config file ({' or '.join(CONFIG_FILE_NAMES)}) in {root}"
        )
        return 1

    try:
        config = ConfigManager.load_config(
            config_path if config_path.is_absolute() else root / config_path, root
        )
        extractor = Extractor(config, root_dir=root)
        stats = extractor.extract_sync(dry_run=args.check)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1
    except ExtractorError as e:
        logger.error(f"Extraction failed: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return 1

    if args.check:
        if stats.generated:
            logger.error(f"Catalogs are out of date: {stats.generated} file(s) would change")
            return 1
        logger.info("Catalogs are up to date")
        return 0

    logger.info(
        f"Generated {len(config.locales)} locale(s) in {config.catalogs.output_folder}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
