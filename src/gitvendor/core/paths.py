"""Well-known vendoring paths and project root resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# Dotfile directory so it never clashes with language-level vendor/ dirs.
VENDOR_DIR = ".git-vendor"
CONFIG_FILE = "vendor.yml"


def vendor_config_path(project_dir: Path) -> Path:
    """Path to ``<project>/.git-vendor/vendor.yml``."""
    return Path(project_dir) / VENDOR_DIR / CONFIG_FILE


def is_vendor_project(path: Path) -> bool:
    """True if ``path`` is a directory holding a vendoring config file."""
    return Path(path).is_dir() and vendor_config_path(path).is_file()


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the current vendoring project root.

    Resolution priority:
    1. ``GITVENDOR_PROJECT_ROOT`` environment variable
    2. Nearest ancestor of ``start`` (default: cwd) containing ``.git-vendor/vendor.yml``
    3. ``start`` itself

    Returns:
        Path: Absolute path to the project root
    """
    env_root = os.environ.get("GITVENDOR_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    here = Path(start or Path.cwd()).resolve()
    for candidate in (here, *here.parents):
        if is_vendor_project(candidate):
            return candidate
    return here


__all__ = [
    "VENDOR_DIR",
    "CONFIG_FILE",
    "vendor_config_path",
    "is_vendor_project",
    "resolve_project_root",
]
