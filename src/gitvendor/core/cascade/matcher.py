"""Heuristic mapping of vendor source URLs to sibling projects.

A URL refers to a sibling only when it textually embeds the sibling's
directory name. For each candidate name (in sorted order, first match wins):

1. Normalize: strip one trailing ``.git``, then trailing slashes.
2. Suffix: the normalized URL ends with ``/<name>``.
3. Relative path: the normalized URL is ``../<name>`` or ``./<name>``, or ends
   with ``/../<name>``.
4. ``file://`` URL: the basename of its path equals ``<name>``.

Any other URL shape (a mirror under a different repository name, a host
alias, ...) never produces an edge, and two siblings reachable under the same
basename on different hosts are not told apart.
"""
from __future__ import annotations

import posixpath
from typing import Iterable

FILE_SCHEME = "file://"


def normalize_source_url(url: str) -> str:
    """Strip a trailing ``.git`` suffix and trailing slashes."""
    normalized = url[: -len(".git")] if url.endswith(".git") else url
    return normalized.rstrip("/")


def _matches(url: str, normalized: str, name: str) -> bool:
    if normalized.endswith("/" + name):
        return True
    if normalized.endswith("/../" + name) or normalized in ("../" + name, "./" + name):
        return True
    if url.startswith(FILE_SCHEME):
        path = url[len(FILE_SCHEME):].rstrip("/")
        if posixpath.basename(path) == name:
            return True
    return False


def match_sibling_by_url(url: str, names: Iterable[str]) -> str:
    """Return the sibling name ``url`` refers to, or ``""`` if none matches."""
    normalized = normalize_source_url(url)
    for name in sorted(names):
        if name and _matches(url, normalized, name):
            return name
    return ""


__all__ = ["match_sibling_by_url", "normalize_source_url"]
