"""CLI command handlers: watch, staged, help."""

from __future__ import annotations

import argparse
import asyncio
from typing import Any

from stagegate.config import load_settings
from stagegate.errors import StageGateError, VcsError
from stagegate.orchestration.models import PrecommitState
from stagegate.vcs.staged_filter import build_inclusion_pattern

from .common import _check_path, _clog, _err, _overrides_from_args


def handle_watch(args: Any) -> int:
    """Watch the project, gate each cycle on build + typecheck, re-stage on a clean cycle."""
    from stagegate.orchestration.runner import run_watch

    path = args.path.resolve()
    if _check_path(path) != 0:
        return 1
    try:
        settings = load_settings(path, _overrides_from_args(args))
        return asyncio.run(run_watch(settings))
    except VcsError as e:
        _err(f"cannot list staged files: {e}")
        return 1
    except StageGateError as e:
        _err(str(e))
        return 1
    except KeyboardInterrupt:
        _clog().info("\nstagegate watch: stopped (Ctrl+C)")
        return 1


def handle_staged(args: Any) -> int:
    """Print the staged snapshot that a watch run would build and re-stage."""
    path = args.path.resolve()
    if _check_path(path) != 0:
        return 1
    try:
        settings = load_settings(path, _overrides_from_args(args))
        state = PrecommitState(enabled=True)
        build_inclusion_pattern(settings.include, state, cwd=settings.root)
    except StageGateError as e:
        _err(str(e))
        return 1
    for f in state.staged_files:
        print(f)
    if not state.staged_files:
        _clog().info("stagegate: no staged files match %s", settings.include.pattern)
    return 0


def handle_help(parser: argparse.ArgumentParser) -> int:
    parser.print_help()
    print()
    print("Typical use as a pre-commit gate:")
    print("  stagegate watch .            # build + typecheck staged files, re-stage when clean")
    print("  stagegate watch --smoke-test # one strict cycle: exit 0 only when fully clean")
    print("  stagegate staged .           # show which staged files are in scope")
    return 0
