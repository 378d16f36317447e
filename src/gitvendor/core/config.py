"""Layered cascade configuration.

Configuration sources (highest to lowest priority):
1. Environment variables: ``GITVENDOR_<SECTION>__<KEY>``
2. Bundled defaults: ``gitvendor/data/config/cascade.yaml``

Per-project ``cascade:`` sections in ``vendor.yml`` are applied later, by the
cascade service, on top of the resolved defaults.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from gitvendor.data import read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "GITVENDOR_"


def _as_bool(v: str) -> Optional[bool]:
    low = v.strip().lower()
    if low in {"true", "false"}:
        return low == "true"
    return None


def _as_int(v: str) -> Optional[int]:
    if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
        return int(v)
    return None


def _as_float(v: str) -> Optional[float]:
    s = v.strip()
    if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
        return float(s)
    return None


def _as_json(v: str) -> Optional[Any]:
    s = v.strip()
    if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
        try:
            return json.loads(s)
        except ValueError:
            return None
    return None


def coerce_env_value(value: str) -> Any:
    """Coerce an environment string to bool, int, float, JSON or stripped text."""
    for caster in (_as_bool, _as_int, _as_float, _as_json):
        result = caster(value)
        if result is not None:
            return result
    return value.strip()


def _iter_env_overrides(environ: Dict[str, str]) -> Iterator[Tuple[List[str], Any]]:
    for key in sorted(environ):
        if not key.startswith(ENV_PREFIX):
            continue
        raw = key[len(ENV_PREFIX):]
        # Only nested keys are config; GITVENDOR_PROJECT_ROOT and friends are not.
        if "__" not in raw:
            continue
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            logger.warning("Ignoring malformed %s* key: %s", ENV_PREFIX, key)
            continue
        yield [seg.lower() for seg in segs], coerce_env_value(environ[key])


def apply_env_overrides(cfg: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Apply ``GITVENDOR_A__B=value`` overrides onto ``cfg`` in place."""
    env = os.environ if environ is None else environ
    for path, value in _iter_env_overrides(dict(env)):
        cur: Dict[str, Any] = cfg
        for part in path[:-1]:
            nxt = cur.get(part)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[part] = nxt
            cur = nxt
        cur[path[-1]] = value
    return cfg


@dataclass(frozen=True, slots=True)
class CascadeDefaults:
    """Resolved cascade settings shared by every project in a run."""

    verify_command: str
    branch_prefix: str = "vendor-cascade"
    remote: str = "origin"
    review_cli: str = "gh"
    pr_title: str = "chore(vendor): cascade pull"
    commit_message: str = "chore(vendor): cascade pull"
    pull_command: Tuple[str, ...] = field(default_factory=lambda: ("git-vendor", "pull"))
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CascadeDefaults":
        pull_command = data.get("pull_command") or ["git-vendor", "pull"]
        if isinstance(pull_command, str):
            pull_command = pull_command.split()
        return cls(
            verify_command=str(data["verify_command"]),
            branch_prefix=str(data.get("branch_prefix", "vendor-cascade")).strip("/"),
            remote=str(data.get("remote", "origin")),
            review_cli=str(data.get("review_cli", "gh")),
            pr_title=str(data.get("pr_title", "chore(vendor): cascade pull")),
            commit_message=str(data.get("commit_message", "chore(vendor): cascade pull")),
            pull_command=tuple(str(p) for p in pull_command),
            log_level=str(data.get("log_level", "WARNING")).upper(),
        )


def load_cascade_defaults(environ: Optional[Dict[str, str]] = None) -> CascadeDefaults:
    """Load bundled cascade defaults with environment overrides applied."""
    cfg = copy.deepcopy(read_yaml("config", "cascade.yaml"))
    apply_env_overrides(cfg, environ)
    section = cfg.get("cascade")
    if not isinstance(section, dict) or "verify_command" not in section:
        raise RuntimeError("cascade.verify_command missing from configuration")
    return CascadeDefaults.from_dict(section)


__all__ = [
    "CascadeDefaults",
    "load_cascade_defaults",
    "apply_env_overrides",
    "coerce_env_value",
]
