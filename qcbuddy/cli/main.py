"""QC Buddy CLI - main application entry point.

Registers the commands and the global --verbose / --version options.
"""

import typer

from qcbuddy.cli.commands import (
    ask_command,
    ingest_command,
    knowledge_command,
    serve_command,
    suggest_tags_command,
)
from qcbuddy.cli.console import set_verbose_mode
from qcbuddy.core.logging import configure_logging

app = typer.Typer(
    name="qcbuddy",
    help="SOP question answering for menu QC",
    add_completion=False,
    pretty_exceptions_enable=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-V", help="Show version and exit"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Debug logging and full tracebacks"
    ),
) -> None:
    """QC Buddy - answers menu QC questions from SOP documents."""
    if version:
        from qcbuddy import __version__

        typer.echo(f"QC Buddy {__version__}")
        raise typer.Exit()

    set_verbose_mode(verbose)
    configure_logging(level="DEBUG" if verbose else "WARNING")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.command("ingest", rich_help_panel="Knowledge")(ingest_command)
app.command("knowledge", rich_help_panel="Knowledge")(knowledge_command)
app.command("ask", rich_help_panel="Answers")(ask_command)
app.command("suggest-tags", rich_help_panel="Answers")(suggest_tags_command)
app.command("serve", rich_help_panel="System")(serve_command)


def cli_main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli_main()
