"""Suggest-tags command - cuisine tags for menu items (keyword based)."""

from pathlib import Path
from typing import List, Optional

import typer

from qcbuddy.cli.core import QCBuddyCommand
from qcbuddy.core.exceptions import QCBuddyError
from qcbuddy.enrichment.tag_suggester import TagSuggestion, suggest_tags


class SuggestTagsCommand(QCBuddyCommand):
    def execute(
        self,
        items: List[str],
        market: str = "AUTO",
        knowledge_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> int:
        try:
            config = self.load_config(config_path)
            store = self.open_store(config, knowledge_dir)
            definitions = store.load_tag_definitions()["cuisine"]
            suggestion = suggest_tags(items, market, definitions)
        except QCBuddyError as e:
            return self.handle_error(e, "While suggesting tags")

        self._print_suggestion(suggestion)
        return 0

    def _print_suggestion(self, suggestion: TagSuggestion) -> None:
        if suggestion.cuisine_tags:
            self.print_success("Cuisine tags: " + ", ".join(suggestion.cuisine_tags))
        else:
            self.print_warning("No cuisine signals found in these items")
        for line in suggestion.reasoning:
            self.console.print(f"  [dim]{line}[/dim]")
        for note in suggestion.notes:
            self.console.print(f"  [italic cyan]Note: {note}[/italic cyan]")


def command(
    items: List[str] = typer.Argument(..., help="Menu item names"),
    market: str = typer.Option("AUTO", "--market", "-m", help="AUTO, AE or JO"),
    knowledge_dir: Optional[Path] = typer.Option(
        None, "--knowledge", "-k", help="Directory holding tags.json"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Suggest up to three cuisine tags for a menu.

    Examples:
        qcbuddy suggest-tags "Chicken Shawarma" "Falafel Wrap" "Hummus"
    """
    exit_code = SuggestTagsCommand().execute(items, market, knowledge_dir, config_path)
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
