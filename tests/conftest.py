"""
Shared pytest fixtures and configuration for QC Buddy tests.

This file is automatically discovered by pytest and provides fixtures
that can be used across all test files.

Fixture Organization
--------------------
- **temp_dir**: Temporary directory for file operations
- **config**: Config rooted at temp_dir with generation switched off
- **make_chunk**: KnowledgeChunk builder
- **knowledge_dir**: Directory with a small set of collection files
- **store**: KnowledgeStore over knowledge_dir
- **mock_generator**: LLMClient double returning a fixed answer
- **docx_file / pptx_file / xlsx_file**: Office document builders
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List, Optional
from unittest.mock import Mock

import pytest

from qcbuddy.core.config import Config
from qcbuddy.core.models import KnowledgeChunk, Market, Topic
from qcbuddy.llm.base import LLMClient
from qcbuddy.storage.knowledge_store import KnowledgeStore


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast tests without external services")
    config.addinivalue_line(
        "markers", "integration: tests that exercise several components together"
    )


# ============================================================================
# Path and Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir: Path) -> Config:
    """Config rooted at temp_dir, offline, reading only temp_dir/knowledge."""
    cfg = Config()
    cfg._base_path = temp_dir
    cfg.knowledge.candidate_dirs = ["knowledge"]
    cfg.llm.api_key = ""
    cfg.llm.mode = "off"
    return cfg


# ============================================================================
# Chunk and Collection Fixtures
# ============================================================================


@pytest.fixture
def make_chunk() -> Callable[..., KnowledgeChunk]:
    """Factory for KnowledgeChunk objects.

    Example:
        def test_rank(make_chunk):
            chunk = make_chunk("Hero images must be 1125x780.", topic=Topic.IMAGES)
    """

    def _make(
        text: str,
        title: str = "SOP",
        market: Market = Market.ALL,
        topic: Topic = Topic.MISC,
    ) -> KnowledgeChunk:
        return KnowledgeChunk(title=title, text=text, market=market, topic=topic)

    return _make


SAMPLE_RECORDS: List[Dict[str, str]] = [
    {
        "title": "Image Guide - Hero",
        "market": "ALL",
        "topic": "images",
        "text": "Hero images must be 1125x780 pixels for every brand.",
    },
    {
        "title": "Image Guide - Logo",
        "market": "ALL",
        "topic": "images",
        "text": "Logo images must be square and at least 1200 pixels wide.",
    },
    {
        "title": "Tags - UAE",
        "market": "AE",
        "topic": "tags",
        "text": "In the UAE you can add up to 3 cuisine tags per restaurant.",
    },
    {
        "title": "Writing - Names",
        "market": "ALL",
        "topic": "writing",
        "text": "Item names should use Title Case and avoid emojis.",
    },
]


def write_json(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def knowledge_dir(temp_dir: Path) -> Path:
    """Knowledge directory with records, a tags file and a glossary."""
    directory = temp_dir / "knowledge"
    write_json(directory / "images_sop.json", SAMPLE_RECORDS[:2])
    write_json(directory / "tags_sop.json", [SAMPLE_RECORDS[2]])
    write_json(directory / "writing_sop.json", [SAMPLE_RECORDS[3]])
    write_json(
        directory / "tags.json",
        {
            "cuisine": [{"tag": "Lebanese", "keywords": ["manakish", "shish taouk"]}],
            "extra": [{"tag": "Healthy", "keywords": ["salad"]}],
        },
    )
    write_json(
        directory / "glossary.json",
        {"AE": [{"en": "Chicken", "ar": "دجاج"}], "JO": [{"en": "Rice", "ar": "رز"}]},
    )
    return directory


@pytest.fixture
def store(config: Config, knowledge_dir: Path) -> KnowledgeStore:
    return KnowledgeStore(config, directories=[knowledge_dir])


@pytest.fixture
def empty_store(config: Config, temp_dir: Path) -> KnowledgeStore:
    empty = temp_dir / "empty"
    empty.mkdir()
    return KnowledgeStore(config, directories=[empty])


# ============================================================================
# LLM Fixtures
# ============================================================================


@pytest.fixture
def mock_generator() -> Mock:
    """LLMClient double that is available and returns one bullet."""
    client = Mock(spec=LLMClient)
    client.is_available.return_value = True
    client.generate.return_value = "• Hero images must be 1125x780 pixels."
    client.model_name = "gemini-test"
    return client


# ============================================================================
# Office Document Builders
# ============================================================================


@pytest.fixture
def docx_file(temp_dir: Path) -> Callable[..., Path]:
    """Build a .docx from (style, text) paragraphs.

    Example:
        path = docx_file("Image_Guide.docx", [("Heading 1", "Hero"), (None, "Use 1125x780.")])
    """
    from docx import Document

    def _build(name: str, paragraphs: List[tuple], table: Optional[List[List[str]]] = None) -> Path:
        doc = Document()
        for style, text in paragraphs:
            if style:
                doc.add_paragraph(text, style=style)
            else:
                doc.add_paragraph(text)
        if table:
            grid = doc.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    grid.cell(r, c).text = value
        path = temp_dir / name
        doc.save(str(path))
        return path

    return _build


@pytest.fixture
def pptx_file(temp_dir: Path) -> Callable[..., Path]:
    """Build a .pptx with one text box per line on each slide."""
    from pptx import Presentation
    from pptx.util import Inches

    def _build(name: str, slides: List[List[str]]) -> Path:
        prs = Presentation()
        layout = prs.slide_layouts[6]  # blank
        for lines in slides:
            slide = prs.slides.add_slide(layout)
            for i, line in enumerate(lines):
                box = slide.shapes.add_textbox(Inches(1), Inches(1 + i), Inches(6), Inches(1))
                box.text_frame.text = line
        path = temp_dir / name
        prs.save(str(path))
        return path

    return _build


@pytest.fixture
def xlsx_file(temp_dir: Path) -> Callable[..., Path]:
    """Build a single-sheet .xlsx from a list of row dicts."""
    import pandas as pd

    def _build(name: str, rows: List[Dict[str, str]]) -> Path:
        path = temp_dir / name
        pd.DataFrame(rows).to_excel(path, index=False, engine="openpyxl")
        return path

    return _build
