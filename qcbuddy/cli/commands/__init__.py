"""CLI commands for QC Buddy."""

from qcbuddy.cli.commands.ask import command as ask_command
from qcbuddy.cli.commands.ingest import command as ingest_command
from qcbuddy.cli.commands.knowledge import command as knowledge_command
from qcbuddy.cli.commands.serve import command as serve_command
from qcbuddy.cli.commands.suggest_tags import command as suggest_tags_command

__all__ = [
    "ask_command",
    "ingest_command",
    "knowledge_command",
    "serve_command",
    "suggest_tags_command",
]
