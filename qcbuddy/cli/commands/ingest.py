"""Ingest command - build chunk collections from raw SOP documents.

Reads .docx / .pptx / .xlsx files from the raw directory, classifies and
chunks every section, and writes one <topic>_sop.json per topic plus
glossary.json and tags.json.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from qcbuddy.cli.core import QCBuddyCommand
from qcbuddy.core.exceptions import QCBuddyError
from qcbuddy.ingest.processor import IngestReport, ingest


class IngestCommand(QCBuddyCommand):
    """Run the ingestion pipeline and print a summary."""

    def execute(
        self,
        raw_dir: Optional[Path] = None,
        out_dir: Optional[Path] = None,
        mode: Optional[str] = None,
        config_path: Optional[Path] = None,
    ) -> int:
        try:
            config = self.load_config(config_path)
            source = raw_dir or config.raw_path
            report = ingest(
                source,
                mode=mode or config.ingest.mode,
                out_dir=out_dir,
                config=config,
            )
        except QCBuddyError as e:
            return self.handle_error(e, "While ingesting documents")

        self._print_report(report)
        return 0

    def _print_report(self, report: IngestReport) -> None:
        if not report.files_seen:
            self.print_warning(f"No documents found in {report.raw_dir}")
            return

        table = Table(title=f"Collections in {report.out_dir}")
        table.add_column("File", style="cyan")
        table.add_column("Chunks", justify="right")
        for name, count in sorted(report.chunks_per_file.items()):
            table.add_row(name, str(count))
        if report.glossary_counts:
            table.add_row("glossary.json", str(sum(report.glossary_counts.values())))
        if report.tag_counts:
            table.add_row("tags.json", str(sum(report.tag_counts.values())))
        self.console.print(table)

        for name, reason in report.skipped.items():
            self.print_warning(f"Skipped {name}: {reason}")
        self.print_success(
            f"{report.files_seen} files, {report.sections} sections, "
            f"{report.chunks_written} chunks ({report.mode} mode)"
        )


def command(
    raw_dir: Optional[Path] = typer.Argument(
        None, help="Directory of raw documents (default: knowledge_raw)"
    ),
    out_dir: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Output directory for collections (default: knowledge)"
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Chunk size mode: smart (1200) or full (3000)"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Build knowledge collections from raw SOP documents.

    Examples:
        qcbuddy ingest
        qcbuddy ingest ./knowledge_raw --out ./knowledge --mode full
    """
    exit_code = IngestCommand().execute(raw_dir, out_dir, mode, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
