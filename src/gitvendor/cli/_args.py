"""Argument registration shared by gitvendor commands."""
from __future__ import annotations

import argparse


def add_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --root: the directory whose subdirectories are the siblings."""
    parser.add_argument(
        "--root",
        type=str,
        help="Directory containing sibling projects "
        "(default: cascade.root of the current project, else its parent directory)",
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Print the cascade order without pulling, verifying or publishing",
    )


def add_logging_flags(parser: argparse.ArgumentParser) -> None:
    """Add --verbose / --log-file.

    Logs never go to stdout, so ``--json`` stays parseable with either flag.
    """
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every git and shell command (DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Append logs to this file instead of stderr",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add --json, --repo-root and the logging flags."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as a JSON document",
    )
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Project to run from (default: nearest directory with .git-vendor/vendor.yml)",
    )
    add_logging_flags(parser)


__all__ = [
    "add_root_flag",
    "add_dry_run_flag",
    "add_logging_flags",
    "add_standard_flags",
]
