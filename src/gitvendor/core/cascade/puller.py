"""Project pullers.

The cascade never fetches or copies vendored files itself; it hands each
project directory to a :class:`ProjectPuller`. Pullers must be idempotent (a
repeated pull with no upstream change reports zero changed files) and must
never prompt for input.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from gitvendor.core.cascade.cancellation import CancellationToken
from gitvendor.core.cascade.exceptions import PullError
from gitvendor.core.cascade.models import PullOutcome
from gitvendor.core.exceptions import CommandError
from gitvendor.core.process import ProcessExecutor

logger = logging.getLogger(__name__)


@runtime_checkable
class ProjectPuller(Protocol):
    """Re-synchronizes the vendored files of a single project."""

    def pull(self, project_dir: Path, cancel: Optional[CancellationToken] = None) -> PullOutcome:
        """Pull ``project_dir`` and report how many files changed.

        Raises:
            PullError: If the project could not be pulled
        """
        ...


def _porcelain_entries(output: str) -> set[str]:
    return {line for line in output.splitlines() if line.strip()}


class CommandPuller:
    """Run an external pull command inside each project.

    The changed-file count is the number of ``git status --porcelain`` entries
    that appear after the pull and were not present before it. Outside a git
    work tree the count is always 0.
    """

    def __init__(
        self,
        command: Sequence[str],
        executor: ProcessExecutor | None = None,
    ) -> None:
        if not command:
            raise ValueError("pull command is required")
        self.command = list(command)
        self.executor = executor or ProcessExecutor()

    def _status(self, project_dir: Path) -> set[str] | None:
        try:
            return _porcelain_entries(
                self.executor.run_git(project_dir, "status", "--porcelain", "--untracked-files=all")
            )
        except CommandError:
            return None

    def pull(self, project_dir: Path, cancel: Optional[CancellationToken] = None) -> PullOutcome:
        before = self._status(project_dir)
        try:
            output = self.executor.run_argv(project_dir, self.command)
        except CommandError as e:
            raise PullError(str(e), context={"dir": str(project_dir)}) from e

        after = self._status(project_dir)
        if before is None or after is None:
            logger.debug("%s is not a git work tree; reporting 0 changed files", project_dir)
            return PullOutcome(
                changed_files=0,
                output=output,
                warnings=("not a git work tree; changed files not counted",),
            )
        return PullOutcome(changed_files=len(after - before), output=output)


__all__ = ["ProjectPuller", "CommandPuller"]
