"""Sibling configuration loading.

Reads ``.git-vendor/vendor.yml`` from a sibling project: the vendored source
list plus the optional ``cascade:`` section.
"""
from __future__ import annotations

from pathlib import Path

import yaml

from gitvendor.core.cascade.models import CascadeSettings, SiblingConfig, VendorEntry
from gitvendor.core.exceptions import VendorConfigError
from gitvendor.core.paths import vendor_config_path
from gitvendor.core.schemas import SchemaValidationError, validate_payload


def load_sibling_config(project_dir: Path) -> SiblingConfig:
    """Load and validate a project's vendor.yml.

    Args:
        project_dir: Project directory containing ``.git-vendor/vendor.yml``

    Returns:
        Parsed SiblingConfig

    Raises:
        VendorConfigError: If the file is unreadable, is not valid YAML, or
            does not match the vendor config schema
    """
    path = vendor_config_path(project_dir)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise VendorConfigError(f"Cannot read {path}: {e}", context={"path": str(path)}) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise VendorConfigError(f"Invalid YAML in {path}: {e}", context={"path": str(path)}) from e

    if data is None:
        data = {}
    try:
        validate_payload(data, "vendor_config")
    except SchemaValidationError as e:
        raise VendorConfigError(
            f"Invalid vendor config {path}: {'; '.join(e.errors)}",
            context={"path": str(path), "errors": e.errors},
        ) from e

    vendors = tuple(VendorEntry.from_dict(item) for item in data.get("vendors") or [])
    cascade = data.get("cascade")
    return SiblingConfig(
        vendors=vendors,
        cascade=CascadeSettings.from_dict(cascade) if cascade is not None else None,
    )


__all__ = ["load_sibling_config"]
