"""Process execution for the cascade.

Two distinct capabilities are exposed:

- ``run_shell``: user-authored commands (``verify_command``) through the
  platform shell (``sh -c`` on POSIX, ``cmd /c`` on Windows).
- ``run_git`` / ``run_argv``: commands this package fully controls, always as
  an argument vector and never through a shell.

Both return combined stdout+stderr and raise :class:`CommandError` on a
non-zero exit. No timeout is applied here; long-running collaborators own
their own timeouts.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from gitvendor.core.exceptions import CommandError
from gitvendor.core.redaction import redact_args, redact_text_credentials

logger = logging.getLogger(__name__)


def shell_argv(command: str) -> list[str]:
    """Return the argv that runs ``command`` through the host shell."""
    if os.name == "nt":
        return ["cmd", "/c", command]
    return ["sh", "-c", command]


class ProcessExecutor:
    """Run external commands in a project directory, capturing combined output."""

    def __init__(self, *, env: dict[str, str] | None = None) -> None:
        self.env = env

    def run_argv(self, cwd: Path, argv: Sequence[str]) -> str:
        """Run ``argv`` in ``cwd`` without a shell.

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        args = [str(a) for a in argv]
        safe_cmd = " ".join(redact_args(args))
        logger.debug("run %s (cwd=%s)", safe_cmd, cwd)
        try:
            proc = subprocess.run(
                args,
                cwd=str(cwd),
                env=self.env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(
                f"Failed to run {safe_cmd}: {e}",
                argv=redact_args(args),
            ) from e

        output = proc.stdout or ""
        if proc.returncode != 0:
            safe_output = redact_text_credentials(output.strip())
            message = f"Command failed (exit {proc.returncode}): {safe_cmd}"
            if safe_output:
                message = f"{message}\n{safe_output}"
            raise CommandError(
                message,
                argv=redact_args(args),
                returncode=proc.returncode,
                output=redact_text_credentials(output),
            )
        return output

    def run_git(self, cwd: Path, *args: str) -> str:
        """Run a git subcommand as an argument vector."""
        return self.run_argv(cwd, ["git", *args])

    def run_shell(self, cwd: Path, command: str) -> str:
        """Run a user-authored command string through the platform shell."""
        return self.run_argv(cwd, shell_argv(command))


class GhReviewCli:
    """Pull request creation through the GitHub ``gh`` CLI."""

    def __init__(self, executor: ProcessExecutor | None = None, *, binary: str = "gh") -> None:
        self.executor = executor or ProcessExecutor()
        self.binary = binary

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def create_pull_request(self, cwd: Path, *, branch: str, title: str, body: str) -> str:
        """Create a PR for ``branch`` and return the URL printed by the CLI."""
        output = self.executor.run_argv(
            cwd,
            [self.binary, "pr", "create", "--title", title, "--body", body, "--head", branch],
        )
        return output.strip()


__all__ = ["ProcessExecutor", "GhReviewCli", "shell_argv"]
