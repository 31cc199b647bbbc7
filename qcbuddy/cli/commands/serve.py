"""Serve command - run the HTTP API with uvicorn."""

from pathlib import Path
from typing import Optional

import typer

from qcbuddy.api.main import run_server
from qcbuddy.cli.core import QCBuddyCommand
from qcbuddy.core.exceptions import QCBuddyError


class ServeCommand(QCBuddyCommand):
    def execute(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        config_path: Optional[Path] = None,
    ) -> int:
        try:
            config = self.load_config(config_path)
            self.print_info(
                f"Serving on {host or config.api.host}:{port or config.api.port} "
                f"(gemini mode: {config.llm.mode})"
            )
            run_server(config, host=host, port=port)
        except QCBuddyError as e:
            return self.handle_error(e, "While starting the API server")
        return 0


def command(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default 0.0.0.0)"),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", min=1, max=65535, help="Port (default 3001 or $PORT)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Start the QC Buddy HTTP API."""
    exit_code = ServeCommand().execute(host, port, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
