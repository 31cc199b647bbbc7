"""Ask command - answer a question from the loaded knowledge."""

from pathlib import Path
from typing import Optional

import typer
from rich.markdown import Markdown
from rich.table import Table

from qcbuddy.cli.core import QCBuddyCommand
from qcbuddy.core.exceptions import QCBuddyError
from qcbuddy.llm import create_llm_client
from qcbuddy.query.service import AnswerResult, AnswerService
from qcbuddy.shared.text_utils import truncate_text

MOOD_STYLES = {"happy": "green", "confused": "yellow", "helpful": "cyan"}


class AskCommand(QCBuddyCommand):
    """Answer one question (or one item per line) and print the result."""

    def execute(
        self,
        question: str,
        market: str = "AUTO",
        offline: bool = False,
        show_sources: bool = False,
        knowledge_dir: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> int:
        try:
            config = self.load_config(config_path)
            store = self.open_store(config, knowledge_dir)
            generator = None if offline else create_llm_client(config)
            service = AnswerService(store, config, generator=generator)
            result = service.ask(question, market, force_offline=offline)
        except QCBuddyError as e:
            return self.handle_error(e, "While answering the question")

        self._print_result(result, show_sources)
        return 0

    def _print_result(self, result: AnswerResult, show_sources: bool) -> None:
        style = MOOD_STYLES.get(result.mood, "white")
        self.console.print(Markdown(result.answer))
        self.console.print(f"[{style}]mood: {result.mood}[/{style}]")

        if not show_sources or not result.sources:
            return
        table = Table(title="Sources")
        table.add_column("Title", style="cyan")
        table.add_column("Market")
        table.add_column("Topic")
        table.add_column("Text")
        for chunk in result.sources:
            table.add_row(
                chunk.title, chunk.market.value, chunk.topic.value, truncate_text(chunk.text, 80)
            )
        self.console.print(table)


def command(
    question: str = typer.Argument(..., help="Question to answer"),
    market: str = typer.Option("AUTO", "--market", "-m", help="AUTO, AE, JO or SA"),
    offline: bool = typer.Option(
        False, "--offline", help="Skip generation and answer from the SOP text only"
    ),
    show_sources: bool = typer.Option(
        False, "--show-sources", "-s", help="Print the chunks behind the answer"
    ),
    knowledge_dir: Optional[Path] = typer.Option(
        None, "--knowledge", "-k", help="Read collections from this directory only"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to config.yaml"
    ),
) -> None:
    """Answer a question from the SOP knowledge.

    Examples:
        qcbuddy ask "what size should the hero banner be"
        qcbuddy ask "is VAT included in prices?" --market AE --show-sources
        qcbuddy ask "how many cuisine tags?" --offline
    """
    exit_code = AskCommand().execute(
        question, market, offline, show_sources, knowledge_dir, config_path
    )
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
