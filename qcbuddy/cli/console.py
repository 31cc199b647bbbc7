"""Console output helpers.

Provides consistent formatting for CLI output messages, including the
error panel with "Why it happened" and "How to fix" sections.
"""

import traceback
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from qcbuddy.core.exceptions import QCBuddyError, sanitize_message

# Shared console instance
_console: Optional[Console] = None

# Set by the --verbose flag
_verbose_mode: bool = False


def get_console() -> Console:
    """Get shared console instance (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbose_mode(enabled: bool) -> None:
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


def tip(message: str) -> None:
    """Display a dim tip line below primary output."""
    get_console().print(f"  [dim]Tip: {message}[/dim]")


class ErrorRenderer:
    """Renders exceptions as panels instead of tracebacks.

    Example
    -------
        try:
            ingest(raw_dir)
        except Exception as e:
            ErrorRenderer.render(e, context="While ingesting knowledge_raw")
            raise typer.Exit(1)
    """

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        show_traceback: Optional[bool] = None,
    ) -> None:
        if isinstance(exc, QCBuddyError):
            code, why, fixes = exc.error_code, exc.why_it_happened, exc.how_to_fix
        else:
            code = "QC-ERR-999"
            why = "An unexpected error occurred"
            fixes = ["Run again with --verbose for the full traceback"]

        panel = Panel(
            ErrorRenderer._build_content(sanitize_message(str(exc)), context, why, fixes),
            title=f"[bold red]Error: {code}[/bold red]",
            border_style="red",
            padding=(1, 2),
        )
        console = get_console()
        console.print(panel)

        if show_traceback if show_traceback is not None else is_verbose_mode():
            tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            console.print("[dim]--- Traceback (--verbose mode) ---[/dim]")
            console.print(tb, style="dim", markup=False)

    @staticmethod
    def _build_content(message: str, context: str, why: str, how_to_fix: List[str]) -> Text:
        text = Text()
        if context:
            text.append(f"{context}\n\n", style="dim")
        text.append(message, style="bold red")
        text.append("\n\n")
        text.append("Why it happened:\n", style="bold cyan")
        text.append(f"  {why}\n\n", style="cyan")
        text.append("How to fix:\n", style="bold green")
        for fix in how_to_fix:
            text.append(f"  - {fix}\n", style="green")
        return text
