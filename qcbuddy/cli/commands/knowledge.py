"""Knowledge command - inspect what the store loaded."""

from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.table import Table

from qcbuddy.cli.console import tip
from qcbuddy.cli.core import QCBuddyCommand
from qcbuddy.core.exceptions import QCBuddyError
from qcbuddy.shared.text_utils import truncate_text


class KnowledgeCommand(QCBuddyCommand):
    """Print chunk counts per topic and market, plus a sample."""

    def execute(
        self,
        sample: int = 5,
        knowledge_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> int:
        try:
            config = self.load_config(config_path)
            store = self.open_store(config, knowledge_dir)
            stats = store.stats()
            chunks = store.sample(sample)
            glossary = store.load_glossary()
        except QCBuddyError as e:
            return self.handle_error(e, "While loading knowledge")

        if not stats["chunks"]:
            self.print_warning("No knowledge loaded")
            tip("run 'qcbuddy ingest' first")
            return 0

        self._print_counts("Chunks per topic", stats["by_topic"])
        self._print_counts("Chunks per market", stats["by_market"])
        if glossary:
            self._print_counts(
                "Glossary entries", {market: len(entries) for market, entries in glossary.items()}
            )
        for path, reason in store.skipped_files.items():
            self.print_warning(f"Skipped {path}: {reason}")

        if chunks:
            table = Table(title=f"Sample ({len(chunks)} of {stats['chunks']})")
            table.add_column("Title", style="cyan")
            table.add_column("Market")
            table.add_column("Topic")
            table.add_column("Text")
            for chunk in chunks:
                table.add_row(
                    chunk.title,
                    chunk.market.value,
                    chunk.topic.value,
                    truncate_text(chunk.text, 160, suffix=""),
                )
            self.console.print(table)
        self.print_success(f"{stats['chunks']} chunks loaded")
        return 0

    def _print_counts(self, title: str, counts: Dict[str, Any]) -> None:
        table = Table(title=title)
        table.add_column("Label", style="cyan")
        table.add_column("Chunks", justify="right")
        for label, count in sorted(counts.items()):
            table.add_row(label, str(count))
        self.console.print(table)


def command(
    sample: int = typer.Option(5, "--sample", "-n", min=0, help="Chunks to preview"),
    knowledge_dir: Optional[Path] = typer.Option(
        None, "--knowledge", "-k", help="Read collections from this directory only"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Show what the knowledge store loads.

    Examples:
        qcbuddy knowledge
        qcbuddy knowledge --sample 10 --knowledge ./knowledge
    """
    exit_code = KnowledgeCommand().execute(sample, knowledge_dir, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
