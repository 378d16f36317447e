"""Cascade subsystem exceptions.

Only the errors defined here abort a whole cascade, and they are always raised
before any project is touched. Per-project problems are recorded on the
result instead.
"""
from __future__ import annotations

from typing import Iterable

from gitvendor.core.exceptions import GitVendorError


class CascadeError(GitVendorError):
    """Base exception for cascade errors."""


class CascadeDiscoveryError(CascadeError):
    """Raised when the sibling root directory cannot be listed."""


class CascadeOptionsError(CascadeError, ValueError):
    """Raised for mutually exclusive or dependent option combinations."""

    def __init__(self, message: str = "") -> None:
        CascadeError.__init__(self, message)
        ValueError.__init__(self, message)


class CascadeCycleError(CascadeError):
    """Raised when the sibling dependency graph contains a cycle."""

    def __init__(self, nodes: Iterable[str]) -> None:
        self.nodes = sorted(nodes)
        super().__init__(
            f"dependency cycle detected among: {', '.join(self.nodes)}",
            context={"nodes": self.nodes},
        )


class PullError(GitVendorError):
    """Raised by a project puller when a project cannot be pulled."""


__all__ = [
    "CascadeError",
    "CascadeDiscoveryError",
    "CascadeOptionsError",
    "CascadeCycleError",
    "PullError",
]
