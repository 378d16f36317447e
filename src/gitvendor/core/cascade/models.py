"""Cascade data models.

Configuration-derived models are immutable; the per-run result models are
filled in while the cascade walks and are discarded after the caller reads
them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gitvendor.core.cascade.exceptions import CascadeOptionsError

PHASE_PULL = "pull"
PHASE_VERIFY = "verify"
PHASE_COMMIT = "commit"
PHASE_PUSH = "push"


@dataclass(frozen=True, slots=True)
class VendorEntry:
    """A vendored dependency declared in vendor.yml.

    Attributes:
        name: Vendor identifier
        url: Source repository URL
        license: Declared SPDX license, if any
        refs: Git refs listed under ``specs``
    """

    name: str
    url: str
    license: str | None = None
    refs: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VendorEntry:
        specs = data.get("specs") or []
        return cls(
            name=data.get("name") or "",
            url=data.get("url") or "",
            license=data.get("license"),
            refs=tuple(str(s["ref"]) for s in specs if s.get("ref")),
        )


@dataclass(frozen=True, slots=True)
class CascadeSettings:
    """Optional ``cascade:`` section of a project's vendor.yml."""

    root: str | None = None
    verify_command: str | None = None
    commit: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CascadeSettings:
        data = data or {}
        return cls(
            root=data.get("root") or None,
            verify_command=data.get("verify_command") or None,
            commit=bool(data.get("commit", False)),
        )


@dataclass(frozen=True, slots=True)
class SiblingConfig:
    """Parsed vendor.yml of a sibling project."""

    vendors: tuple[VendorEntry, ...] = ()
    cascade: CascadeSettings | None = None

    @property
    def urls(self) -> list[str]:
        return [v.url for v in self.vendors if v.url]


@dataclass(frozen=True, slots=True)
class SiblingProject:
    """A vendoring-enabled directory under the cascade root."""

    name: str
    path: Path
    config: SiblingConfig


@dataclass(frozen=True, slots=True)
class SkippedProject:
    """A sibling dropped from the graph because its config could not be loaded."""

    name: str
    path: Path
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "dir": str(self.path), "reason": self.reason}


@dataclass(frozen=True, slots=True)
class PullOutcome:
    """What a project puller reports for one project.

    Attributes:
        changed_files: Number of files the pull changed on disk
        output: Captured pull output
        warnings: Non-fatal warnings from the puller
    """

    changed_files: int = 0
    output: str = ""
    warnings: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.changed_files > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "changed_files": self.changed_files,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True, slots=True)
class CascadeOptions:
    """Controls which phases run after each pull.

    Attributes:
        dry_run: Preview the walk without executing anything
        verify: Run the verify command after each pull
        commit: Commit after each pull
        push: Push after each commit (requires ``commit``)
        pr: Create a branch and pull request instead of committing directly
        verify_command: Override for every project's verify command
    """

    dry_run: bool = False
    verify: bool = False
    commit: bool = False
    push: bool = False
    pr: bool = False
    verify_command: str | None = None

    def validate(self) -> None:
        """Reject invalid flag combinations.

        Raises:
            CascadeOptionsError: If ``pr`` and ``push`` are combined or
                ``push`` is requested without ``commit``
        """
        if self.pr and self.push:
            raise CascadeOptionsError("--pr and --push are mutually exclusive")
        if self.push and not self.commit:
            raise CascadeOptionsError("--push requires --commit")


@dataclass(frozen=True, slots=True)
class CascadeFailure:
    """A project that failed during one phase of the walk."""

    project: str
    phase: str
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"project": self.project, "phase": self.phase, "error": self.error}


@dataclass(slots=True)
class CascadeProjectResult:
    """Per-project details collected during the walk."""

    name: str
    dir: Path
    pull_result: PullOutcome | None = None
    verify_passed: bool = False
    verify_output: str = ""
    pr_info: str = ""
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "dir": str(self.dir),
            "verify_passed": self.verify_passed,
        }
        if self.pull_result is not None:
            data["pull_result"] = self.pull_result.to_dict()
        if self.verify_output:
            data["verify_output"] = self.verify_output
        if self.pr_info:
            data["pr_info"] = self.pr_info
        return data


@dataclass(slots=True)
class CascadeResult:
    """Aggregate outcome of a cascade run."""

    order: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    current: list[str] = field(default_factory=list)
    failed: list[CascadeFailure] = field(default_factory=list)
    skipped: list[SkippedProject] = field(default_factory=list)
    project_results: dict[str, CascadeProjectResult] = field(default_factory=dict)

    def add_failure(self, project: str, phase: str, error: str) -> CascadeFailure:
        failure = CascadeFailure(project=project, phase=phase, error=error)
        self.failed.append(failure)
        return failure

    def failures_for(self, project: str) -> list[CascadeFailure]:
        return [f for f in self.failed if f.project == project]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": list(self.order),
            "updated": list(self.updated),
            "current": list(self.current),
            "failed": [f.to_dict() for f in self.failed],
            "skipped": [s.to_dict() for s in self.skipped],
            "project_results": {
                name: self.project_results[name].to_dict()
                for name in self.order
                if name in self.project_results
            },
        }


__all__ = [
    "PHASE_PULL",
    "PHASE_VERIFY",
    "PHASE_COMMIT",
    "PHASE_PUSH",
    "VendorEntry",
    "CascadeSettings",
    "SiblingConfig",
    "SiblingProject",
    "SkippedProject",
    "PullOutcome",
    "CascadeOptions",
    "CascadeFailure",
    "CascadeProjectResult",
    "CascadeResult",
]
