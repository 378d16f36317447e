"""
gitvendor cascade run command.

SUMMARY: Pull every sibling project in dependency order
"""
from __future__ import annotations

import argparse
from typing import TYPE_CHECKING

from gitvendor.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_root_flag,
    add_standard_flags,
    configure_cli_logging,
    get_repo_root,
)

if TYPE_CHECKING:
    from gitvendor.core.cascade import CascadeResult

SUMMARY = "Pull every sibling project in dependency order"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_root_flag(parser)
    add_dry_run_flag(parser)
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Run the verify command in each project after pulling",
    )
    parser.add_argument(
        "--verify-command",
        type=str,
        help="Override the verify command for every project (implies --verify)",
    )
    parser.add_argument(
        "--commit",
        action="store_true",
        help="Commit pulled changes in each project",
    )
    parser.add_argument(
        "--push",
        action="store_true",
        help="Push after each commit (requires --commit)",
    )
    parser.add_argument(
        "--pr",
        action="store_true",
        help="Commit on a new branch, push it and open a pull request (exclusive with --push)",
    )
    add_standard_flags(parser)


def _print_text(formatter: OutputFormatter, result: CascadeResult, *, dry_run: bool) -> None:
    if not result.order:
        formatter.text("No sibling projects with .git-vendor/vendor.yml found.")
    elif dry_run:
        formatter.text(f"Cascade order ({len(result.order)} projects, dry run):")
        for i, name in enumerate(result.order, start=1):
            formatter.text(f"  {i}. {name}  ({result.project_results[name].dir})")
    else:
        formatter.text(f"Cascaded {len(result.order)} projects:")
        formatter.text("")
        for name in result.order:
            failures = result.failures_for(name)
            if failures:
                status = "FAILED"
            elif name in result.updated:
                status = "updated"
            else:
                status = "current"
            formatter.text(f"  {name}: {status}")
            project = result.project_results.get(name)
            if project is not None and project.pull_result is not None:
                formatter.text(f"    Changed files: {project.pull_result.changed_files}")
                for warning in project.pull_result.warnings:
                    formatter.text(f"    Warning: {warning}")
            if project is not None and project.verify_passed:
                formatter.text("    Verify: passed")
            if project is not None and project.pr_info:
                formatter.text(f"    PR: {project.pr_info}")
            for failure in failures:
                formatter.text(f"    {failure.phase} error: {failure.error}")

    for skipped in result.skipped:
        formatter.text(f"  skipped {skipped.name}: {skipped.reason}")


def main(args: argparse.Namespace) -> int:
    """Run a cascade over the sibling projects."""
    from gitvendor.core.cascade import (
        CancellationToken,
        CascadeOptions,
        CascadeService,
        cancel_on_sigint,
    )
    from gitvendor.core.cascade.service import project_cascade_settings, resolve_cascade_root
    from gitvendor.core.config import load_cascade_defaults

    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        defaults = load_cascade_defaults()
        configure_cli_logging(args, default_level=defaults.log_level)

        project_root = get_repo_root(args)
        settings = project_cascade_settings(project_root)
        root = resolve_cascade_root(project_root, args.root)

        options = CascadeOptions(
            dry_run=bool(args.dry_run),
            verify=bool(args.verify or args.verify_command),
            commit=bool(args.commit or settings.commit),
            push=bool(args.push),
            pr=bool(args.pr),
            verify_command=args.verify_command or None,
        )
        options.validate()

        service = CascadeService(root, defaults=defaults)
        with cancel_on_sigint(CancellationToken()) as token:
            result = service.cascade(options, token)

        if formatter.json_mode:
            formatter.json_output({"root": str(root), "dry_run": options.dry_run, **result.to_dict()})
        else:
            _print_text(formatter, result, dry_run=options.dry_run)

        # Per-project failures live in the result; only fatal errors change the exit code.
        return 0

    except Exception as e:
        formatter.error(e, error_code="cascade_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    parsed = parser.parse_args()
    exit(main(parsed))
