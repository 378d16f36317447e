"""
gitvendor cascade graph command.

SUMMARY: Show sibling projects, their dependencies and the cascade order
"""
from __future__ import annotations

import argparse

from gitvendor.cli import (
    OutputFormatter,
    add_root_flag,
    add_standard_flags,
    configure_cli_logging,
    get_repo_root,
)

SUMMARY = "Show sibling projects, their dependencies and the cascade order"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_root_flag(parser)
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    """Print the sibling dependency graph."""
    from gitvendor.core.cascade import CascadeCycleError, CascadeService
    from gitvendor.core.cascade.service import resolve_cascade_root
    from gitvendor.core.config import load_cascade_defaults

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        defaults = load_cascade_defaults()
        configure_cli_logging(args, default_level=defaults.log_level)

        root = resolve_cascade_root(get_repo_root(args), args.root)
        built = CascadeService(root, defaults=defaults).build_graph()

        order: list[str] = []
        cycle: list[str] = []
        try:
            order = built.graph.order()
        except CascadeCycleError as e:
            cycle = e.nodes

        if formatter.json_mode:
            formatter.json_output({
                "root": str(root),
                "projects": {name: str(path) for name, path in sorted(built.project_dirs.items())},
                "dependencies": built.graph.to_dict(),
                "dependents": {name: built.graph.dependents_of(name) for name in sorted(built.graph.nodes)},
                "order": order,
                "cycle": cycle,
                "skipped": [s.to_dict() for s in built.skipped],
            })
        else:
            if not len(built.graph):
                formatter.text(f"No sibling projects with .git-vendor/vendor.yml under {root}.")
            else:
                formatter.text(f"Sibling projects under {root}:")
                formatter.text("")
                for name, deps in built.graph.to_dict().items():
                    formatter.text(f"  {name}")
                    formatter.text(f"    Depends on: {', '.join(deps) if deps else '-'}")
                    needed_by = built.graph.dependents_of(name)
                    formatter.text(f"    Needed by: {', '.join(needed_by) if needed_by else '-'}")
                formatter.text("")
                if cycle:
                    formatter.text(f"Dependency cycle among: {', '.join(cycle)}")
                else:
                    formatter.text(f"Order: {' -> '.join(order)}")
            for skipped in built.skipped:
                formatter.text(f"Skipped {skipped.name}: {skipped.reason}")

        return 1 if cycle else 0

    except Exception as e:
        formatter.error(e, error_code="cascade_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
