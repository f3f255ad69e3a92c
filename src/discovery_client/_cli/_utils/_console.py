from typing import Any, Iterable, Sequence

import click
from rich.console import Console
from rich.table import Table


class ConsoleLogger:
    """Console output for the CLI: plain messages, errors and tables."""

    def __init__(self) -> None:
        self._console = Console(highlight=False, soft_wrap=True)
        self._err_console = Console(stderr=True, highlight=False, soft_wrap=True)

    def info(self, message: str) -> None:
        self._console.print(message, markup=False)

    def success(self, message: str) -> None:
        self._console.print(f"[green]{message}[/green]")

    def warning(self, message: str) -> None:
        self._err_console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self._err_console.print(f"[red]Error:[/red] {message}")
        raise click.exceptions.Exit(1)

    def table(
        self, title: str, columns: Sequence[str], rows: Iterable[Sequence[Any]]
    ) -> None:
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self._console.print(table)
