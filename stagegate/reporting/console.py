"""Console UX for the watch loop: clear/compiling/waiting/success/failure/warnings."""

from __future__ import annotations

from typing import Sequence

from rich.console import Console

WAITING_FOR_TYPECHECK = "Files successfully emitted, waiting for typecheck results..."


class Reporter:
    """Renders cycle results. Diagnostic text is printed verbatim (markup off)."""

    def __init__(self, console: Console | None = None, *, interactive: bool | None = None) -> None:
        self.console = console or Console()
        self.interactive = self.console.is_terminal if interactive is None else interactive

    def _text(self, text: str = "") -> None:
        self.console.print(text, markup=False, highlight=False)

    def clear(self) -> None:
        """Clear the terminal, only when attached to one."""
        if self.interactive:
            self.console.clear()

    def compiling(self) -> None:
        self.clear()
        self._text("Compiling...")

    def waiting_for_typecheck(self) -> None:
        self.console.print(f"[yellow]{WAITING_FOR_TYPECHECK}[/yellow]", highlight=False)

    def success(self) -> None:
        self.console.print("[green]Successfully![/green]", highlight=False)

    def failed(self, errors: Sequence[str]) -> None:
        self.console.print("[red]Failed to compile.[/red]\n", highlight=False)
        self._text("\n\n".join(errors))

    def warnings(self, warnings: Sequence[str]) -> None:
        self.console.print("[yellow]Compiled with warnings.[/yellow]\n", highlight=False)
        self._text("\n\n".join(warnings))
        self.console.print(
            "\nSearch for the [underline yellow]keywords[/underline yellow] to learn more about each warning.",
            highlight=False,
        )
        self.console.print(
            "To ignore, add [cyan]# noqa[/cyan] or [cyan]# type: ignore[/cyan] to the end of the line.\n",
            highlight=False,
        )

    def engine_failed(self, error: BaseException | str) -> None:
        """Build engine could not be constructed or crashed mid-cycle."""
        self.console.print("[red]Failed to compile.[/red]", highlight=False)
        self._text()
        self._text(str(error) or error.__class__.__name__)
        self._text()

    def staged(self, paths: Sequence[str]) -> None:
        if paths:
            self.console.print(f"[dim]Staged {len(paths)} file(s).[/dim]", highlight=False)
