from contextlib import contextmanager
from typing import Any, Generator, Optional

from rich.console import Console
from rich.markup import escape
from rich.status import Status


class ConsoleLogger:
    """User-facing CLI output; diagnostics go to stderr so stdout stays pipeable."""

    def __init__(self, no_color: bool = False) -> None:
        self.out = Console(highlight=False, no_color=no_color)
        self.err = Console(stderr=True, highlight=False, no_color=no_color)

    def info(self, message: str) -> None:
        self.err.print(message, style="dim", markup=False, soft_wrap=True)

    def success(self, message: str) -> None:
        self.err.print(f"[green]✓[/green] {escape(message)}", soft_wrap=True)

    def error(self, message: str) -> None:
        self.err.print(f"[red]✗[/red] {escape(message)}", soft_wrap=True)

    def print(self, renderable: Any) -> None:
        self.out.print(renderable, markup=False, soft_wrap=True)

    def print_json(self, data: Any) -> None:
        self.out.print_json(data=data)

    @contextmanager
    def spinner(self, message: str) -> Generator[Optional[Status], None, None]:
        if not self.err.is_terminal:
            yield None
            return
        with self.err.status(message) as status:
            yield status
