"""Exception hierarchy shared by every gitvendor subsystem.

Each error carries a ``context`` mapping with machine-readable details that
``--json`` output reports next to the message.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping


class GitVendorError(Exception):
    """Base exception for gitvendor."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context or {})

    def to_json_error(self) -> Dict[str, Any]:
        return {
            "message": str(self),
            "code": type(self).__name__,
            "context": self.context,
        }


class VendorConfigError(GitVendorError, ValueError):
    """A vendor.yml file cannot be read, parsed or validated."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        GitVendorError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class CommandError(GitVendorError, RuntimeError):
    """An external command could not be started or exited non-zero.

    Attributes:
        argv: Redacted argument vector
        returncode: Exit status, or None if the process never started
        output: Redacted combined stdout/stderr
    """

    def __init__(
        self,
        message: str,
        *,
        argv: list[str] | None = None,
        returncode: int | None = None,
        output: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if argv is not None:
            ctx.setdefault("argv", list(argv))
        if returncode is not None:
            ctx.setdefault("returncode", returncode)
        GitVendorError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.argv = list(argv or [])
        self.returncode = returncode
        self.output = output


__all__ = [
    "GitVendorError",
    "VendorConfigError",
    "CommandError",
]
