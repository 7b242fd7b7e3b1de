"""CLI command dispatch wiring extracted from stagegate_cli."""

from __future__ import annotations

import argparse
from typing import Any, Callable

from stagegate.cli import handlers


def dispatch_command(parser: argparse.ArgumentParser, args: Any) -> int:
    """Dispatch parsed CLI args to the matching command handler."""
    from stagegate.orchestration.logging import configure_cli_logging

    configure_cli_logging(quiet=getattr(args, "quiet", False), verbose=getattr(args, "verbose", False))

    if args.command is None:
        return handlers.handle_help(parser)

    dispatch: dict[str, Callable[[], int]] = {
        "help": lambda: handlers.handle_help(parser),
        "watch": lambda: handlers.handle_watch(args),
        "staged": lambda: handlers.handle_staged(args),
    }
    handler = dispatch.get(args.command)
    if handler is None:
        return handlers.handle_help(parser)
    return handler()
