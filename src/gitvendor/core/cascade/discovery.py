"""Sibling project discovery.

A sibling is an immediate subdirectory of the cascade root that holds
``.git-vendor/vendor.yml``. Siblings whose config cannot be loaded are kept
out of the graph so one broken neighbour never blocks a cascade.
"""
from __future__ import annotations

import logging
from pathlib import Path

from gitvendor.core.cascade.config import load_sibling_config
from gitvendor.core.cascade.exceptions import CascadeDiscoveryError
from gitvendor.core.cascade.models import SiblingProject, SkippedProject
from gitvendor.core.exceptions import VendorConfigError
from gitvendor.core.paths import is_vendor_project

logger = logging.getLogger(__name__)


def discover_siblings(root: Path) -> dict[str, Path]:
    """Map directory name -> absolute path for every vendoring sibling of ``root``.

    Raises:
        CascadeDiscoveryError: If ``root`` cannot be listed
    """
    root = Path(root)
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise CascadeDiscoveryError(
            f"cascade: read root directory {root}: {e}",
            context={"root": str(root)},
        ) from e

    siblings: dict[str, Path] = {}
    for entry in entries:
        # An entry that cannot be inspected is not a sibling.
        try:
            if not is_vendor_project(entry):
                continue
            path = entry.resolve()
        except OSError as e:
            logger.debug("Ignoring %s: %s", entry, e)
            continue
        siblings[entry.name] = path
    return siblings


def load_siblings(
    siblings: dict[str, Path],
) -> tuple[dict[str, SiblingProject], list[SkippedProject]]:
    """Load every sibling's config, separating loadable projects from skipped ones."""
    projects: dict[str, SiblingProject] = {}
    skipped: list[SkippedProject] = []
    for name, path in sorted(siblings.items()):
        try:
            config = load_sibling_config(path)
        except VendorConfigError as e:
            logger.warning("Skipping sibling %s: %s", name, e)
            skipped.append(SkippedProject(name=name, path=path, reason=str(e)))
            continue
        projects[name] = SiblingProject(name=name, path=path, config=config)
    return projects, skipped


__all__ = ["discover_siblings", "load_siblings"]
