"""Git boundary: list the staged snapshot and re-stage files. Synchronous, blocking calls."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Sequence

from stagegate.errors import VcsError
from stagegate.orchestration.logging import get_logger

_LOG = get_logger("vcs.git")

LIST_STAGED_CMD: tuple[str, ...] = ("git", "diff", "--cached", "--name-only", "--relative", "--diff-filter=ACM", "-z")


def _run_git(cmd: Sequence[str], cwd: Path | None) -> subprocess.CompletedProcess[str]:
    _LOG.debug("git: %s (cwd=%s)", " ".join(cmd), cwd or ".")
    try:
        proc = subprocess.run(list(cmd), cwd=cwd, capture_output=True, text=True, encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise VcsError(cmd, -1, str(e)) from e
    if proc.returncode != 0:
        raise VcsError(cmd, proc.returncode, proc.stderr or "")
    return proc


def split_snapshot(raw: str) -> list[str]:
    """Split NUL-terminated `-z` output into paths. Names are verbatim: no C-quoting, no trimming."""
    return [path for path in raw.split("\0") if path]


def list_staged_files(cwd: Path | None = None) -> list[str]:
    """Return added/copied/modified staged paths (deleted files excluded), relative to cwd.

    Raises VcsError on non-zero exit; callers treat that as a fatal startup error.
    """
    proc = _run_git(LIST_STAGED_CMD, cwd)
    return split_snapshot(proc.stdout or "")


def stage_files(paths: Sequence[str], cwd: Path | None = None) -> None:
    """Run `git add` for exactly these paths. Zero paths is a no-op; output is discarded."""
    if not paths:
        _LOG.debug("git add: nothing to stage")
        return
    _run_git(("git", "add", "--", *paths), cwd)
