from __future__ import annotations

import logging
import sys
from pathlib import Path

_CONFIGURED_KEY: tuple[str, str] | None = None
_GITVENDOR_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Path | None = None) -> None:
    """Configure the ``gitvendor`` logger hierarchy.

    Writes to ``log_path`` when given, otherwise to stderr (never stdout, so
    ``--json`` output stays machine-readable). Idempotent per-process: a second
    call with the same target and level is a no-op.
    """
    global _CONFIGURED_KEY, _GITVENDOR_HANDLER

    target = str(Path(log_path).resolve()) if log_path is not None else "<stderr>"
    key = (target, str(level).upper())
    if _CONFIGURED_KEY == key and _GITVENDOR_HANDLER is not None:
        return

    pkg_logger = logging.getLogger("gitvendor")
    pkg_logger.setLevel(_level_from_name(level))

    if _GITVENDOR_HANDLER is not None:
        pkg_logger.removeHandler(_GITVENDOR_HANDLER)
        _GITVENDOR_HANDLER.close()
        _GITVENDOR_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(_FORMAT))
    pkg_logger.addHandler(handler)

    _GITVENDOR_HANDLER = handler
    _CONFIGURED_KEY = key


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: drop the installed handler."""
    global _CONFIGURED_KEY, _GITVENDOR_HANDLER
    if _GITVENDOR_HANDLER is not None:
        logging.getLogger("gitvendor").removeHandler(_GITVENDOR_HANDLER)
        _GITVENDOR_HANDLER.close()
    _CONFIGURED_KEY = None
    _GITVENDOR_HANDLER = None


def suppress_lastresort_in_json_mode() -> None:
    """Prevent stdlib logging's lastResort handler from polluting JSON output.

    Python's logging module emits WARNING+ records to stderr through the
    implicit ``lastResort`` handler when no handlers are configured. Installing
    a NullHandler on the root logger keeps ``--json`` runs quiet without
    changing any levels.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = [
    "configure_stdlib_logging",
    "reset_stdlib_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
