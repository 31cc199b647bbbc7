"""Base class for CLI commands.

Commands load configuration, do their work and return an exit code. Error
display is shared here so every command renders failures the same way.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from qcbuddy.cli.console import ErrorRenderer, get_console
from qcbuddy.core.config import Config, load_config
from qcbuddy.storage.knowledge_store import KnowledgeStore


class QCBuddyCommand(ABC):
    """Abstract base class for QC Buddy CLI commands.

    Example:
        class MyCommand(QCBuddyCommand):
            def execute(self, name: str) -> int:
                self.print_success(name)
                return 0
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or get_console()

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> int:
        """Run the command and return an exit code (0 = success)."""

    def load_config(self, config_path: Optional[Path] = None) -> Config:
        return load_config(config_path)

    def open_store(self, config: Config, knowledge_dir: Optional[Path] = None) -> KnowledgeStore:
        """Store over the configured directories, or a single override."""
        directories = [knowledge_dir] if knowledge_dir is not None else None
        return KnowledgeStore(config, directories=directories)

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[cyan]i[/cyan] {message}")

    def handle_error(self, error: Exception, context: str = "") -> int:
        """Render the error and return exit code 1."""
        ErrorRenderer.render(error, context)
        return 1
