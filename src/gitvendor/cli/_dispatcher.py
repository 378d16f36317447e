"""
Auto-discovery CLI dispatcher for gitvendor.

Every non-underscore subfolder of ``gitvendor/cli`` is a domain and every
non-underscore module inside it is a command (``gitvendor <domain> <command>``).
A command module exposes ``SUMMARY``, ``register_args(parser)`` and
``main(args) -> int``; adding a command means adding a module.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Callable, Optional

from gitvendor import __version__

CLI_DIR = Path(__file__).parent


@dataclass(frozen=True, slots=True)
class Command:
    """A discovered command module."""

    name: str
    module: ModuleType

    @property
    def summary(self) -> str:
        return getattr(self.module, "SUMMARY", self.name)

    @property
    def register_args(self) -> Optional[Callable[[argparse.ArgumentParser], None]]:
        return getattr(self.module, "register_args", None)

    @property
    def main(self) -> Optional[Callable[[argparse.Namespace], int]]:
        return getattr(self.module, "main", None)


def _is_public_module(path: Path) -> bool:
    return path.suffix == ".py" and not path.name.startswith("_")


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """Map domain name -> folder for every folder holding at least one command."""
    return {
        item.name: item
        for item in sorted(CLI_DIR.iterdir())
        if item.is_dir()
        and not item.name.startswith("_")
        and any(_is_public_module(f) for f in item.iterdir())
    }


@lru_cache(maxsize=32)
def discover_commands(domain: str) -> dict[str, Command]:
    """Import every command module of ``domain``.

    A module that fails to import is reported on stderr and left out, so one
    broken command does not take the whole CLI down.
    """
    commands: dict[str, Command] = {}
    for item in sorted((CLI_DIR / domain).glob("*.py")):
        if not _is_public_module(item):
            continue
        try:
            module = importlib.import_module(f"gitvendor.cli.{domain}.{item.stem}")
        except ImportError as e:
            print(f"Warning: Could not import {domain}.{item.stem}: {e}", file=sys.stderr)
            continue
        commands[item.stem] = Command(name=item.stem, module=module)
    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the ``gitvendor`` parser with one subparser per domain and command."""
    parser = argparse.ArgumentParser(
        prog="gitvendor",
        description="gitvendor - vendor file subsets from git repositories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    domains = parser.add_subparsers(dest="domain", title="domains", metavar="<domain>")
    for domain in discover_domains():
        commands = discover_commands(domain)
        if not commands:
            continue
        domain_parser = domains.add_parser(domain, help=f"{domain.title()} commands")
        domain_parser.set_defaults(_domain_parser=domain_parser)
        subparsers = domain_parser.add_subparsers(dest="command", title="commands", metavar="<command>")

        for name, command in commands.items():
            primary = name.replace("_", "-")
            cmd_parser = subparsers.add_parser(
                primary,
                aliases=[name] if primary != name else [],
                help=command.summary,
            )
            if command.register_args:
                command.register_args(cmd_parser)
            if command.main:
                cmd_parser.set_defaults(_func=command.main)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point of the ``gitvendor`` console script.

    Returns:
        The command's exit code; 130 when interrupted
    """
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    func = getattr(args, "_func", None)
    if func is None:
        # Bare domain (or nothing at all): show the relevant help.
        getattr(args, "_domain_parser", parser).print_help()
        return 0

    try:
        return int(func(args) or 0)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
