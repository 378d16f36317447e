"""Result rendering for gitvendor commands.

stdout carries the result (text or one JSON document); errors always go to
stderr so a failing ``--json`` run never yields half a document on stdout.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from gitvendor.core.exceptions import GitVendorError


def format_json(data: Any, indent: int = 2) -> str:
    """Serialize ``data``; paths and other objects are rendered with str()."""
    return json.dumps(data, indent=indent, default=str)


class OutputFormatter:
    """Print command results in text or JSON mode."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def json_output(self, data: Any) -> None:
        print(format_json(data, self.indent))

    def text(self, message: str = "") -> None:
        print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report a fatal error on stderr.

        In JSON mode the payload is ``{"error", "message"}``; gitvendor
        errors add their class name as ``code`` and a non-empty ``context``
        (e.g. cycle nodes).
        """
        msg = message or str(error)
        if not self.json_mode:
            print(f"Error: {msg}", file=sys.stderr)
            return
        payload: Dict[str, Any] = {"error": error_code, "message": msg}
        if isinstance(error, GitVendorError):
            details = error.to_json_error()
            payload["code"] = details["code"]
            if details["context"]:
                payload["context"] = details["context"]
        print(format_json(payload, self.indent), file=sys.stderr)


__all__ = ["OutputFormatter", "format_json"]
