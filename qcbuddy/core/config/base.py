"""
Base configuration classes for project layout and document ingestion.

Provides the dataclasses that define where raw documents and generated
knowledge collections live, and how ingestion chunks section text.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ProjectConfig:
    """Project-level configuration."""

    name: str = "qc-buddy"
    version: str = "1.0.0"
    raw_dir: str = "knowledge_raw"  # Source office documents
    knowledge_dir: str = "knowledge"  # Generated *_sop.json collections


@dataclass
class IngestConfig:
    """Document ingestion configuration."""

    mode: str = "smart"  # smart (tight chunks) or full (archival)
    max_chars_smart: int = 1200
    max_chars_full: int = 3000
    supported_formats: List[str] = field(
        default_factory=lambda: [".docx", ".pptx", ".xlsx"]
    )

    def max_chars(self, mode: str = "") -> int:
        """Chunk size cap for the given mode (defaults to the configured one)."""
        selected = (mode or self.mode).lower()
        if selected == "full":
            return self.max_chars_full
        return self.max_chars_smart


@dataclass
class KnowledgeConfig:
    """Knowledge store configuration."""

    # Scanned in order; the first occurrence of a file wins
    candidate_dirs: List[str] = field(default_factory=lambda: [".", "knowledge"])
    exclude_files: List[str] = field(
        default_factory=lambda: [
            "glossary.json",
            "tags.json",
            "package.json",
            "package-lock.json",
        ]
    )
    prefer_rule_like: bool = True
