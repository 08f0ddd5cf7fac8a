"""Rich Console wrapper that stays printable on non-UTF-8 terminals."""
from rich.console import Console
from rich.markup import escape
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console that sanitizes Unicode output and offers status helpers.

    Inherits from Rich's Console; print() replaces glyphs with ASCII on
    terminals that cannot encode them.
    """

    def __init__(self, *args, **kwargs):
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with Unicode sanitization (same arguments as Console.print)."""
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def error(self, message: str) -> None:
        """Print an error line. The message is escaped, not parsed as markup."""
        self.print(f"[bold red]✗ {escape(message)}[/bold red]")

    def warning(self, message: str) -> None:
        self.print(f"[yellow]⚠ {escape(message)}[/yellow]")

    def success(self, message: str) -> None:
        self.print(f"[green]✓ {escape(message)}[/green]")
