"""Host primitives: transient messages and the interactive chooser."""

from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

T = TypeVar("T")

CANCEL_ANSWERS = frozenset({"", "q", "quit"})


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class Chooser(Protocol):
    def choose(
        self,
        get_candidates: Callable[[str], Sequence[T]],
        render: Callable[[T], str],
        placeholder: str = "",
    ) -> T | None: ...


class ConsoleNotifier:
    """Fire-and-forget message printed to the console."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def notify(self, message: str) -> None:
        self._console.print(f"[bold]Jira:[/bold] {message}")


class ConsoleChooser:
    """Search-then-pick prompt.

    The user types a query, gets a numbered list of candidates and answers with
    a number. "/text" searches again. A blank answer, "q" or Ctrl-C cancels.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def _prompt(self, text: str) -> str | None:
        try:
            return typer.prompt(text, default="", show_default=False).strip()
        except (typer.Abort, EOFError, KeyboardInterrupt):
            return None

    def choose(
        self,
        get_candidates: Callable[[str], Sequence[T]],
        render: Callable[[T], str],
        placeholder: str = "",
    ) -> T | None:
        query = self._prompt(placeholder or "Search")
        if query is None:
            return None

        while True:
            candidates = list(get_candidates(query))
            if not candidates:
                self._console.print(f"[dim]No matches for '{escape(query)}'.[/dim]")
            else:
                table = Table(show_header=False, box=None)
                table.add_column("#", style="cyan", justify="right")
                table.add_column("Candidate")
                for index, candidate in enumerate(candidates, start=1):
                    table.add_row(str(index), render(candidate))
                self._console.print(table)

            answer = self._prompt("Number, /search or blank to cancel")
            if answer is None or answer.lower() in CANCEL_ANSWERS:
                return None
            if answer.startswith("/"):
                query = answer[1:].strip()
                continue
            if answer.isdigit() and 1 <= int(answer) <= len(candidates):
                return candidates[int(answer) - 1]
            self._console.print(f"[yellow]'{escape(answer)}' is not a valid choice.[/yellow]")
