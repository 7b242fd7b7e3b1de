"""Parser wiring extracted from the stagegate_cli entrypoint."""

from __future__ import annotations

import argparse
from pathlib import Path


def build_parser(*, version: str) -> argparse.ArgumentParser:
    """Configure top-level CLI parser and subcommands."""
    parser = argparse.ArgumentParser(
        prog="stagegate",
        description="stagegate: watch, build and typecheck staged files; re-stage them only when clean",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {version}")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors in the log")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command")

    _add_watch_command(subparsers)
    _add_staged_command(subparsers)
    subparsers.add_parser("help", help="Show stagegate command overview")

    return parser


def _add_scope_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", nargs="?", default=".", type=Path, help="Project root (default: .)")
    p.add_argument("--include", type=str, default=None, metavar="REGEX", help="In-scope path pattern (default: [tool.stagegate] include or \\.py$)")


def _add_watch_command(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("watch", help="Watch, build and typecheck; stage the snapshot after a clean cycle")
    _add_scope_arguments(p)
    p.add_argument("--build-cmd", type=str, default=None, metavar="CMD", help="Build command; in-scope files are appended")
    p.add_argument("--typecheck-cmd", type=str, default=None, metavar="CMD", help="Type-check command ('' disables)")
    p.add_argument("--lint-cmd", type=str, default=None, metavar="CMD", help="Lint command; findings are warnings")
    p.add_argument("--debounce", type=int, default=None, metavar="MS", help="Change aggregation window (default: 300)")
    p.add_argument("--poll", type=int, default=None, metavar="MS", help="Poll interval instead of native fs events")
    p.add_argument("--no-precommit", action="store_false", default=None, dest="precommit", help="Do not scope to staged files and do not stage")
    p.add_argument("--compile-on-type-error", action="store_true", default=None, help="Report type errors as warnings")
    p.add_argument("--smoke-test", action="store_true", default=None, help="Exit after the first cycle: 0 only if fully clean")


def _add_staged_command(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("staged", help="Print the staged files in scope")
    _add_scope_arguments(p)
