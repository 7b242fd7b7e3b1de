"""Derive the inclusion pattern that scopes a precommit run to the staged snapshot."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable

from stagegate.orchestration.logging import get_logger
from stagegate.orchestration.models import PrecommitState

from .git import list_staged_files

_LOG = get_logger("vcs.staged_filter")

# Empty negative lookahead: never matches anything.
MATCH_NOTHING = r"(?!)"


def pattern_for_paths(paths: Iterable[str]) -> re.Pattern[str]:
    """Compile a pattern matching exactly the given paths (anchored, escaped alternation)."""
    alternatives = [re.escape(p) for p in paths]
    if not alternatives:
        return re.compile(MATCH_NOTHING)
    return re.compile(r"\A(?:" + "|".join(alternatives) + r")\Z")


def build_inclusion_pattern(
    base_pattern: re.Pattern[str],
    state: PrecommitState,
    *,
    cwd: Path | None = None,
    list_staged: Callable[[Path | None], list[str]] | None = None,
) -> re.Pattern[str]:
    """Narrow base_pattern to the staged files it accepts.

    Precommit off: base_pattern is returned unchanged and git is never called.
    Precommit on: the filtered snapshot is recorded on `state` (the stage action later
    re-adds exactly that set) and a pattern matching only those paths is returned.
    VcsError from listing propagates.
    """
    if not state.enabled:
        return base_pattern
    snapshot = (list_staged or list_staged_files)(cwd)
    filtered = [path for path in snapshot if base_pattern.search(path)]
    state.record_snapshot(filtered)
    _LOG.debug("staged snapshot: %d file(s), %d in scope", len(snapshot), len(filtered))
    return pattern_for_paths(filtered)
