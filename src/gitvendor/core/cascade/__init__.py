"""Multi-repository cascade.

Re-synchronizes every vendoring project under a common root in dependency
order.

Key components:
- discover_siblings / load_siblings: find sibling projects and their vendor.yml
- match_sibling_by_url: heuristic vendor URL -> sibling mapping
- DependencyGraph / topological_sort: dependencies-first ordering
- CascadeService: build the graph and walk it (pull, verify, publish)
- CascadePublisher: commit / push or branch + pull request per project
"""
from __future__ import annotations

from gitvendor.core.cascade.cancellation import CancellationToken, cancel_on_sigint
from gitvendor.core.cascade.discovery import discover_siblings, load_siblings
from gitvendor.core.cascade.exceptions import (
    CascadeCycleError,
    CascadeDiscoveryError,
    CascadeError,
    CascadeOptionsError,
    PullError,
)
from gitvendor.core.cascade.graph import DependencyGraph, topological_sort
from gitvendor.core.cascade.matcher import match_sibling_by_url
from gitvendor.core.cascade.models import (
    CascadeFailure,
    CascadeOptions,
    CascadeProjectResult,
    CascadeResult,
    PullOutcome,
    SiblingProject,
    SkippedProject,
)
from gitvendor.core.cascade.publish import CascadePublisher
from gitvendor.core.cascade.puller import CommandPuller, ProjectPuller
from gitvendor.core.cascade.service import CascadeGraph, CascadeService, resolve_cascade_root

__all__ = [
    # Service
    "CascadeService",
    "CascadeGraph",
    "CascadePublisher",
    "resolve_cascade_root",
    # Graph
    "DependencyGraph",
    "topological_sort",
    "discover_siblings",
    "load_siblings",
    "match_sibling_by_url",
    # Pullers
    "ProjectPuller",
    "CommandPuller",
    # Cancellation
    "CancellationToken",
    "cancel_on_sigint",
    # Models
    "CascadeOptions",
    "CascadeResult",
    "CascadeProjectResult",
    "CascadeFailure",
    "PullOutcome",
    "SiblingProject",
    "SkippedProject",
    # Exceptions
    "CascadeError",
    "CascadeDiscoveryError",
    "CascadeCycleError",
    "CascadeOptionsError",
    "PullError",
]
