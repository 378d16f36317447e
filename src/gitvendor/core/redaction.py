"""Credential scrubbing for command lines and command output.

Vendor URLs may carry tokens (``https://token@host/repo.git``) and git echoes
remote URLs back in push/fetch errors. Everything that reaches a log record,
an exception message or a cascade result passes through here first.
"""
from __future__ import annotations

import re
from urllib.parse import urlsplit, urlunsplit

REDACTED = "<redacted>"

# scheme://userinfo@ anywhere in a string
_URL_USERINFO_RE = re.compile(r"(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^\s/@]+@")
# user@host: remotes, except the conventional anonymous "git" user
_SCP_USER_RE = re.compile(r"(?<![\w.+-])(?!git@)[\w.+-]+@(?P<host>[\w.-]+):")
_SCP_REMOTE_RE = re.compile(r"(?P<user>[^@\s/]+)@(?P<host>[^:\s/]+):(?P<path>.+)")


def redact_url_credentials(url: str) -> str:
    """Drop the userinfo of a URL, or mask the user of an scp-style remote."""
    raw = str(url)
    if "://" in raw:
        parts = urlsplit(raw)
        if "@" not in parts.netloc:
            return raw
        return urlunsplit(parts._replace(netloc=parts.netloc.rpartition("@")[2]))

    m = _SCP_REMOTE_RE.fullmatch(raw)
    if m and m.group("user") != "git":
        return f"{REDACTED}@{m.group('host')}:{m.group('path')}"
    return raw


def redact_text_credentials(text: str) -> str:
    """Mask credentials embedded anywhere in free-form text."""
    s = _URL_USERINFO_RE.sub(rf"\g<scheme>{REDACTED}@", str(text))
    return _SCP_USER_RE.sub(rf"{REDACTED}@\g<host>:", s)


def redact_args(args: list[str]) -> list[str]:
    """Redact an argv for logging.

    Shell command strings can embed URLs anywhere, so each argument is also
    scrubbed as free text.
    """
    return [redact_text_credentials(redact_url_credentials(a)) for a in args]


__all__ = ["redact_url_credentials", "redact_text_credentials", "redact_args"]
