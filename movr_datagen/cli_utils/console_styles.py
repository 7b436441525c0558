from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text


class ConsoleStyles:
    """
    Centralized styles and helper methods for rich console output.
    """

    SUCCESS = Style(color="green", bold=True)
    ERROR = Style(color="red", bold=True)
    INFO = Style(color="cyan", italic=True)
    TITLE = Style(color="magenta", bold=True)

    @staticmethod
    def print_success(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.SUCCESS))

    @staticmethod
    def print_error(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.ERROR))

    @staticmethod
    def print_info(console: Console, message: str) -> None:
        console.print(Text(message, style=ConsoleStyles.INFO))

    @staticmethod
    def build_table(
        title: str, headers: Sequence[str], rows: Iterable[Sequence[object]]
    ) -> Table:
        """Build a rich table; the first column is highlighted."""
        table = Table(title=title, title_style=ConsoleStyles.TITLE)
        for i, header in enumerate(headers):
            table.add_column(header, style="cyan" if i == 0 else None)
        for row in rows:
            table.add_row(*(str(value) for value in row))
        return table
