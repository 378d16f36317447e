"""
gitvendor CLI package.

Commands are discovered from domain subfolders (cascade/, ...); each command
module exposes SUMMARY, register_args(parser) and main(args) -> int.

Shared helpers:
- _output: text / JSON rendering
- _args: flag registration
- _utils: project root and logging setup
"""
from ._output import OutputFormatter, format_json
from ._args import (
    add_dry_run_flag,
    add_logging_flags,
    add_root_flag,
    add_standard_flags,
)
from ._utils import configure_cli_logging, get_repo_root

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_json",
    # Argument helpers
    "add_root_flag",
    "add_dry_run_flag",
    "add_logging_flags",
    "add_standard_flags",
    # Utilities
    "configure_cli_logging",
    "get_repo_root",
]
