"""Logging for the watch loop and CLI.

All module loggers live under ``stagegate`` and carry no level of their own, so one
call to configure_cli_logging (or STAGEGATE_LOG_LEVEL) governs every cycle, git and
type-check message, including loggers created at import time.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "stagegate"


def _resolve_level() -> int:
    raw = os.environ.get("STAGEGATE_LOG_LEVEL", "").strip().upper()
    return logging.getLevelNamesMapping().get(raw, logging.INFO)


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Apply --quiet/--verbose (which win over STAGEGATE_LOG_LEVEL) and attach the stderr handler once."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = _resolve_level()
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(h)
        root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return stagegate.<name>; its effective level follows the stagegate root."""
    root = logging.getLogger(ROOT_LOGGER)
    if root.level == logging.NOTSET:
        root.setLevel(_resolve_level())
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
