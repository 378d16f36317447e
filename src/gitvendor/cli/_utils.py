"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path

from gitvendor.core.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get the current project root from args or auto-detect.

    Args:
        args: Parsed arguments with optional repo_root attribute

    Returns:
        Path: Project root path
    """
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def configure_cli_logging(args: argparse.Namespace, *, default_level: str = "WARNING") -> None:
    """Set up logging from --verbose / --log-file / --json.

    Records go to the log file when one is given, otherwise to stderr, at
    DEBUG with --verbose and at ``default_level`` (cascade.log_level)
    otherwise. JSON mode without either flag keeps stderr quiet.
    """
    from gitvendor.core.stdlib_logging import (
        configure_stdlib_logging,
        suppress_lastresort_in_json_mode,
    )

    verbose = bool(getattr(args, "verbose", False))
    log_file = getattr(args, "log_file", None)
    if not (verbose or log_file) and getattr(args, "json", False):
        suppress_lastresort_in_json_mode()
        return
    configure_stdlib_logging(
        level="DEBUG" if verbose else default_level,
        log_path=Path(log_file) if log_file else None,
    )


__all__ = ["get_repo_root", "configure_cli_logging"]
