"""Cascade orchestration.

A cascade discovers every vendoring sibling under a root directory, builds the
dependency graph from their vendor URLs, sorts it dependencies-first and pulls
each project in turn, optionally verifying and publishing the result.

Flow:
  1. Validate option combinations (fatal)
  2. Discover siblings and build the graph (fatal if the root is unreadable)
  3. Topological sort (fatal on cycles)
  4. Walk the order sequentially: pull, verify, publish
  5. Return the aggregated result
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from gitvendor.core.cascade.cancellation import CancellationToken
from gitvendor.core.cascade.config import load_sibling_config
from gitvendor.core.cascade.discovery import discover_siblings, load_siblings
from gitvendor.core.cascade.exceptions import PullError
from gitvendor.core.cascade.graph import DependencyGraph
from gitvendor.core.cascade.matcher import match_sibling_by_url
from gitvendor.core.cascade.models import (
    PHASE_PULL,
    PHASE_VERIFY,
    CascadeOptions,
    CascadeProjectResult,
    CascadeResult,
    CascadeSettings,
    SiblingProject,
    SkippedProject,
)
from gitvendor.core.cascade.publish import CascadePublisher, ReviewCli
from gitvendor.core.cascade.puller import CommandPuller, ProjectPuller
from gitvendor.core.config import CascadeDefaults, load_cascade_defaults
from gitvendor.core.exceptions import CommandError, VendorConfigError
from gitvendor.core.paths import is_vendor_project
from gitvendor.core.process import GhReviewCli, ProcessExecutor

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeGraph:
    """Everything graph building produces for one cascade invocation."""

    graph: DependencyGraph
    projects: dict[str, SiblingProject] = field(default_factory=dict)
    skipped: list[SkippedProject] = field(default_factory=list)

    @property
    def project_dirs(self) -> dict[str, Path]:
        return {name: p.path for name, p in self.projects.items()}


def project_cascade_settings(project_root: Path) -> CascadeSettings:
    """Cascade settings of the project the command runs from (empty if none)."""
    if not is_vendor_project(project_root):
        return CascadeSettings()
    try:
        config = load_sibling_config(project_root)
    except VendorConfigError as e:
        logger.warning("Ignoring cascade settings of %s: %s", project_root, e)
        return CascadeSettings()
    return config.cascade or CascadeSettings()


def resolve_cascade_root(project_root: Path, explicit: Optional[str] = None) -> Path:
    """Pick the directory holding the siblings.

    Priority: explicit ``--root``, then the project's ``cascade.root``
    (relative to the project), then the project's parent directory.
    """
    if explicit:
        return Path(explicit).expanduser().resolve()
    settings = project_cascade_settings(project_root)
    if settings.root:
        root = Path(settings.root).expanduser()
        return (root if root.is_absolute() else project_root / root).resolve()
    return Path(project_root).resolve().parent


class CascadeService:
    """Discover, order and walk the sibling dependency graph."""

    def __init__(
        self,
        root_dir: Path,
        *,
        puller: Optional[ProjectPuller] = None,
        executor: Optional[ProcessExecutor] = None,
        review_cli: Optional[ReviewCli] = None,
        defaults: Optional[CascadeDefaults] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the service.

        Args:
            root_dir: Directory containing the sibling projects
            puller: Project puller (defaults to running ``pull_command``)
            executor: Process executor for verify and git commands
            review_cli: Pull request CLI (defaults to ``gh``)
            defaults: Resolved cascade defaults (bundled + environment)
            today: Clock used to date PR branch names
        """
        self.root_dir = Path(root_dir)
        self.defaults = defaults or load_cascade_defaults()
        self.executor = executor or ProcessExecutor()
        self.puller = puller or CommandPuller(self.defaults.pull_command, self.executor)
        if review_cli is None:
            review_cli = GhReviewCli(self.executor, binary=self.defaults.review_cli)
        self.publisher = CascadePublisher(
            self.defaults,
            executor=self.executor,
            review_cli=review_cli,
            today=today,
        )

    def build_graph(self) -> CascadeGraph:
        """Build the sibling dependency graph.

        An edge A -> B exists when one of A's vendor URLs matches sibling B.
        Siblings with unloadable configs are reported in ``skipped``.

        Raises:
            CascadeDiscoveryError: If the root directory cannot be listed
        """
        siblings = discover_siblings(self.root_dir)
        projects, skipped = load_siblings(siblings)

        graph = DependencyGraph()
        for name, project in projects.items():
            graph.add_node(name)
            for url in project.config.urls:
                dep = match_sibling_by_url(url, projects.keys())
                if dep and dep != name:
                    graph.add_edge(name, dep)
        graph.validate()

        logger.debug(
            "Built cascade graph under %s: %d projects, %d skipped",
            self.root_dir,
            len(graph),
            len(skipped),
        )
        return CascadeGraph(graph=graph, projects=projects, skipped=skipped)

    def resolve_verify_command(self, options: CascadeOptions, project: SiblingProject) -> str:
        if options.verify_command:
            return options.verify_command
        settings = project.config.cascade
        if settings is not None and settings.verify_command:
            return settings.verify_command
        return self.defaults.verify_command

    def cascade(
        self,
        options: CascadeOptions,
        cancel: Optional[CancellationToken] = None,
    ) -> CascadeResult:
        """Walk the graph in dependency order.

        Raises:
            CascadeOptionsError: For invalid option combinations
            CascadeDiscoveryError: If the root directory cannot be listed
            CascadeCycleError: If the graph contains a cycle
        """
        options.validate()

        built = self.build_graph()
        if not len(built.graph):
            return CascadeResult(skipped=list(built.skipped))

        order = built.graph.order()
        result = CascadeResult(order=order, skipped=list(built.skipped))

        if options.dry_run:
            for name in order:
                project = built.projects[name]
                result.project_results[name] = CascadeProjectResult(name=name, dir=project.path)
            return result

        for name in order:
            if cancel is not None and cancel.cancelled:
                result.add_failure(name, PHASE_PULL, cancel.reason or "cancelled")
                continue
            self._walk_project(built.projects[name], options, result, cancel)

        logger.info(
            "Cascade finished: %d updated, %d current, %d failures",
            len(result.updated),
            len(result.current),
            len(result.failed),
        )
        return result

    def _walk_project(
        self,
        project: SiblingProject,
        options: CascadeOptions,
        result: CascadeResult,
        cancel: Optional[CancellationToken],
    ) -> None:
        name = project.name
        project_result = CascadeProjectResult(name=name, dir=project.path)
        result.project_results[name] = project_result

        logger.info("Pulling %s", name)
        try:
            outcome = self.puller.pull(project.path, cancel)
        except PullError as e:
            logger.warning("Pull failed in %s: %s", name, e)
            project_result.error = str(e)
            result.add_failure(name, PHASE_PULL, str(e))
            return
        project_result.pull_result = outcome

        if outcome.changed:
            result.updated.append(name)
        else:
            result.current.append(name)

        if options.verify:
            command = self.resolve_verify_command(options, project)
            logger.info("Verifying %s: %s", name, command)
            try:
                project_result.verify_output = self.executor.run_shell(project.path, command)
            except CommandError as e:
                logger.warning("Verify failed in %s: %s", name, e)
                project_result.verify_output = e.output
                project_result.error = str(e)
                result.add_failure(name, PHASE_VERIFY, str(e))
                return
            project_result.verify_passed = True

        if options.pr:
            self.publisher.publish_pull_request(name, project.path, outcome, project_result, result)
        elif options.commit:
            self.publisher.publish_direct(name, project.path, outcome, result, push=options.push)


__all__ = [
    "CascadeService",
    "CascadeGraph",
    "project_cascade_settings",
    "resolve_cascade_root",
]
