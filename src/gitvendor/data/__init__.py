"""
Bundled data for gitvendor.

- config/cascade.yaml: cascade defaults (overridable via GITVENDOR_* env vars)
- schemas/*.schema.yaml: JSON Schemas for user-authored YAML files

Files are read through importlib.resources so they resolve the same way from
a source checkout and from an installed wheel.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from typing import Any

import yaml


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """
    Parse a bundled YAML file (cached per process).

    Callers that mutate the result must copy it first.

    Args:
        subpackage: Data folder name ("config" or "schemas")
        filename: YAML filename inside that folder

    Returns:
        Parsed document; an empty file yields ``{}``
    """
    resource = resources.files(__name__).joinpath(subpackage, filename)
    return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}


def clear_caches() -> None:
    """Forget cached documents (tests edit env overrides between runs)."""
    read_yaml.cache_clear()


__all__ = [
    "read_yaml",
    "clear_caches",
]
