"""Console output and the default notifier.

Provides a Console class that wraps rich for consistent output, and
``console_notifier``, the notifier every HandlerStore starts with.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.table import Table


class Console:
    """Output manager wrapping rich.

    Errors go to stderr, everything else to stdout. Messages are escaped,
    so text coming from an API response is never read as rich markup.
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
            quiet: Suppress non-essential output.
        """
        self._console = RichConsole(
            force_terminal=force_terminal,
            stderr=False,
        )
        self._err_console = RichConsole(
            force_terminal=force_terminal,
            stderr=True,
        )
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        """Print a success message."""
        self._console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {escape(message)}")
        if hint:
            self._err_console.print(f"  [dim]{escape(hint)}[/dim]")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{escape(message)}[/dim]")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
    ) -> None:
        """Print a table.

        Args:
            rows: List of dicts containing row data.
            columns: List of (key, header) tuples defining columns.
            title: Optional table title.
        """
        table = Table(title=title, show_header=True, header_style="bold")

        for _, header in columns:
            table.add_column(header)

        for row in rows:
            table.add_row(*(escape(str(row.get(key, ""))) for key, _ in columns))

        self._console.print(table)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default


def console_notifier(options: dict[str, Any]) -> None:
    """Show a notification on the default console.

    ``severity`` picks the style: negative, warning and positive map to
    error, warning and success; anything else prints as info. An optional
    ``hint`` is shown under errors.
    """
    console = get_console()
    severity = options.get("severity")
    message = str(options.get("message", ""))

    if severity == "negative":
        hint = options.get("hint")
        console.error(message, hint=str(hint) if hint else None)
    elif severity == "warning":
        console.warning(message)
    elif severity == "positive":
        console.success(message)
    else:
        console.info(message)
