"""Console output helpers for the boxs CLI."""

from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text


def format_duration(milliseconds: int) -> str:
    """Format a duration like ``1h 2m 3s``, ``2m 3s`` or ``3s``."""
    seconds = max(int(milliseconds), 0) // 1000
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"


def format_file_size(size_bytes: int) -> str:
    """Format a byte count using B/KB/MB/GB units."""
    units = ["B", "KB", "MB", "GB"]
    size = float(size_bytes)
    unit_index = 0
    while size >= 1024 and unit_index < len(units) - 1:
        size /= 1024
        unit_index += 1
    if unit_index == 0:
        return f"{int(size)} {units[unit_index]}"
    return f"{size:.1f} {units[unit_index]}"


class ConsoleOutput:
    """Styled terminal output.

    Messages are printed without markup parsing since they carry file paths.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.error_console = Console(stderr=True) if console is None else console

    def _print(self, console: Console, message: str, style: Optional[str] = None) -> None:
        console.print(message, style=style, markup=False, emoji=False)

    def header(self, title: str) -> None:
        self.console.print(f"\n📦 boxs - {title}", style="bold cyan")
        self.console.print("=" * 50)

    def divider(self) -> None:
        self.console.print("-" * 50, style="dim")

    def info(self, message: str) -> None:
        self._print(self.console, message, style="blue")

    def log(self, message: str) -> None:
        self._print(self.console, message)

    def success(self, message: str) -> None:
        self._print(self.console, f"✅ {message}", style="green")

    def warn(self, message: str) -> None:
        self._print(self.console, f"⚠️  {message}", style="yellow")

    def error(self, message: str) -> None:
        self._print(self.error_console, f"❌ {message}", style="bold red")

    def table(self, columns: Sequence[str], rows: Iterable[Sequence[str]], title: Optional[str] = None) -> None:
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*[Text(str(cell)) for cell in row])
        self.console.print(table)

    def lines(self, messages: List[str], indent: int = 2) -> None:
        for message in messages:
            self.log(" " * indent + message)
