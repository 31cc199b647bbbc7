"""Command-line interface for QC Buddy (typer + rich)."""
