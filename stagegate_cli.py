"""
stagegate CLI

Entry point: environment loading, argument parsing and dispatch only.
All command logic lives in stagegate.cli.handlers.
"""

from __future__ import annotations

import sys
from pathlib import Path

from stagegate import __version__
from stagegate.cli.wiring.dispatch import dispatch_command
from stagegate.cli.wiring.parser import build_parser
from stagegate.config import load_environment


def _load_environment(env_file: Path | None = None) -> None:
    """Load project .env before any settings are read."""
    load_environment(env_file)


def _build_parser():
    return build_parser(version=__version__)


def main(argv: list[str] | None = None) -> int:
    _load_environment()
    parser = _build_parser()
    args = parser.parse_args(argv)
    return dispatch_command(parser, args)


if __name__ == "__main__":
    sys.exit(main())
