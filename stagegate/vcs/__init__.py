"""Version-control boundary and staged-snapshot scoping."""

from .git import list_staged_files, stage_files
from .staged_filter import build_inclusion_pattern, pattern_for_paths

__all__ = ["build_inclusion_pattern", "list_staged_files", "pattern_for_paths", "stage_files"]
