"""Commit / push / pull-request publishing for cascaded projects.

Every git call goes through :meth:`ProcessExecutor.run_git` (argument vector,
no shell). Failures are recorded on the :class:`CascadeResult`; nothing here
raises past the publisher.
"""
from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Protocol

from gitvendor.core.cascade.models import (
    PHASE_COMMIT,
    PHASE_PUSH,
    CascadeProjectResult,
    CascadeResult,
    PullOutcome,
)
from gitvendor.core.config import CascadeDefaults
from gitvendor.core.exceptions import CommandError
from gitvendor.core.process import ProcessExecutor

logger = logging.getLogger(__name__)


class ReviewCli(Protocol):
    """Code-review CLI able to open pull requests (e.g. ``gh``)."""

    def is_available(self) -> bool: ...

    def create_pull_request(self, cwd: Path, *, branch: str, title: str, body: str) -> str: ...


def _had_changes(outcome: Optional[PullOutcome]) -> bool:
    return outcome is not None and outcome.changed


class CascadePublisher:
    """Publish a pulled project either by direct commit or by branch + PR."""

    def __init__(
        self,
        defaults: CascadeDefaults,
        *,
        executor: ProcessExecutor,
        review_cli: Optional[ReviewCli] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.defaults = defaults
        self.executor = executor
        self.review_cli = review_cli
        self.today = today

    def branch_name(self, project_dir: Path) -> str:
        return f"{self.defaults.branch_prefix}/{Path(project_dir).name}/{self.today().isoformat()}"

    def pr_body(self, project: str) -> str:
        return (
            f"Automated cascade pull for project `{project}`.\n\n"
            "_Created by `gitvendor cascade run --pr`._"
        )

    def commit(self, project_dir: Path) -> None:
        """Stage everything and commit with the cascade message.

        ``--no-verify`` skips commit hooks; drift is expected right after a pull.

        Raises:
            CommandError: If staging or committing fails (including "nothing to commit")
        """
        try:
            self.executor.run_git(project_dir, "add", "-A")
        except CommandError as e:
            raise CommandError(f"git add: {e}", argv=e.argv, returncode=e.returncode, output=e.output) from e
        self.executor.run_git(project_dir, "commit", "--no-verify", "-m", self.defaults.commit_message)

    def publish_direct(
        self,
        name: str,
        project_dir: Path,
        outcome: Optional[PullOutcome],
        result: CascadeResult,
        *,
        push: bool = False,
    ) -> None:
        """Commit (and optionally push) on the current branch."""
        try:
            self.commit(project_dir)
        except CommandError as e:
            # An empty commit after a no-op pull is expected.
            if _had_changes(outcome):
                logger.warning("Commit failed in %s: %s", name, e)
                result.add_failure(name, PHASE_COMMIT, str(e))
            else:
                logger.debug("Nothing to commit in %s", name)
            return

        logger.info("Committed cascade pull in %s", name)
        if not push:
            return
        try:
            self.executor.run_git(project_dir, "push")
        except CommandError as e:
            logger.warning("Push failed in %s: %s", name, e)
            result.add_failure(name, PHASE_PUSH, str(e))
            return
        logger.info("Pushed %s", name)

    def publish_pull_request(
        self,
        name: str,
        project_dir: Path,
        outcome: Optional[PullOutcome],
        project_result: CascadeProjectResult,
        result: CascadeResult,
    ) -> None:
        """Create a dated branch, commit, push it and open a pull request.

        The original branch is checked out again before returning.
        """
        branch = self.branch_name(project_dir)

        try:
            original = self.executor.run_git(project_dir, "rev-parse", "--abbrev-ref", "HEAD").strip()
            # Detached HEAD: restore the commit itself.
            if original == "HEAD":
                original = self.executor.run_git(project_dir, "rev-parse", "HEAD").strip()
        except CommandError as e:
            result.add_failure(name, PHASE_COMMIT, f"failed to get current branch: {e}")
            return

        try:
            self.executor.run_git(project_dir, "checkout", "-b", branch)
        except CommandError as e:
            result.add_failure(name, PHASE_COMMIT, f"failed to create branch {branch}: {e}")
            return

        delete_branch = False
        try:
            try:
                self.commit(project_dir)
            except CommandError as e:
                delete_branch = True
                if _had_changes(outcome):
                    logger.warning("Commit failed in %s: %s", name, e)
                    result.add_failure(name, PHASE_COMMIT, str(e))
                else:
                    logger.debug("Nothing to commit in %s; dropping %s", name, branch)
                return

            try:
                self.executor.run_git(project_dir, "push", "-u", self.defaults.remote, branch)
            except CommandError as e:
                logger.warning("Push of %s failed in %s: %s", branch, name, e)
                result.add_failure(name, PHASE_PUSH, f"failed to push branch {branch}: {e}")
                return

            project_result.pr_info = self._open_pull_request(name, project_dir, branch)
        finally:
            self._restore(project_dir, original, branch if delete_branch else None)

    def manual_command(self, branch: str) -> str:
        """The exact command that opens the pull request by hand."""
        return f"{self.defaults.review_cli} pr create --title '{self.defaults.pr_title}' --head {branch}"

    def _open_pull_request(self, name: str, project_dir: Path, branch: str) -> str:
        cli = self.review_cli
        if cli is None or not cli.is_available():
            return (
                f"Branch {branch} pushed. Install {self.defaults.review_cli} to auto-create PRs, "
                f"or create manually:\n  {self.manual_command(branch)}"
            )

        try:
            url = cli.create_pull_request(
                project_dir, branch=branch, title=self.defaults.pr_title, body=self.pr_body(name)
            )
        except CommandError as e:
            logger.warning("PR creation failed for %s: %s", name, e)
            return (
                f"Branch {branch} pushed. PR creation failed: {e}\n"
                f"Create manually: {self.manual_command(branch)}"
            )
        logger.info("Opened pull request for %s: %s", name, url)
        return url

    def _restore(self, project_dir: Path, original: str, delete_branch: Optional[str]) -> None:
        try:
            self.executor.run_git(project_dir, "checkout", original)
        except CommandError as e:
            logger.warning("Could not restore branch %s in %s: %s", original, project_dir, e)
            return
        if delete_branch:
            try:
                self.executor.run_git(project_dir, "branch", "-D", delete_branch)
            except CommandError as e:
                logger.warning("Could not delete branch %s in %s: %s", delete_branch, project_dir, e)


__all__ = ["CascadePublisher", "ReviewCli"]
