"""DOCX extractor - Split Word SOPs into heading-delimited sections.

The body is first rendered to a light markdown form (``#`` heading markers,
``•`` list markers, ``a | b`` table rows) and then split at every heading.
"""

import re
from pathlib import Path
from typing import Any, List, Optional
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table

from qcbuddy.core.exceptions import ExtractionError
from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import Section
from qcbuddy.shared.text_utils import clean_section_text

logger = get_logger(__name__)

_HEADING_LINE = re.compile(r"^(#+)\s+(.*)$")
_HEADING_LEVEL = re.compile(r"(\d+)")
_LIST_MARKER = re.compile(r"^\s*[-*]\s+", re.MULTILINE)


def can_process(file_path: Path) -> bool:
    """Check if a file is a DOCX file."""
    return file_path.suffix.lower() == ".docx"


def extract_sections(file_path: Path) -> List[Section]:
    """
    Extract sections from a Word document.

    Raises:
        ExtractionError: If the file cannot be opened as a DOCX package
    """
    try:
        doc = Document(str(file_path))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ExtractionError(f"Cannot open {file_path.name}: {e}") from e

    markdown = docx_to_markdown(doc)
    return split_sections(markdown, file_path.name)


def docx_to_markdown(doc: Any) -> str:
    """Render paragraphs and tables in document order as markdown-ish lines."""
    lines: List[str] = []
    for block in doc.iter_inner_content():
        if isinstance(block, Table):
            lines.extend(_table_lines(block))
            continue
        text = block.text.strip()
        if text:
            lines.append(_format_paragraph(block, text))
    return "\n".join(lines)


def _format_paragraph(para: Any, text: str) -> str:
    """Format paragraph based on style (heading, list item or body)."""
    style = para.style.name if para.style is not None else ""

    if style.startswith("Heading") or style == "Title":
        return "#" * _heading_level(style) + " " + text
    if "List" in style:
        return f"• {text}"
    return text


def _heading_level(style: str) -> int:
    match = _HEADING_LEVEL.search(style)
    if match:
        return max(1, min(int(match.group(1)), 6))
    return 1


def _table_lines(table: Table) -> List[str]:
    rows = []
    for row in table.rows:
        cells = [cell.text.strip() for cell in row.cells]
        if any(cells):
            rows.append(" | ".join(cells))
    return rows


def split_sections(markdown: str, filename: str) -> List[Section]:
    """
    Split markdown text into sections at each heading line.

    Content before the first heading becomes a generated "Section N". A
    heading with no body keeps the heading text as its body. Without any
    heading the whole document is one section titled "Document".
    """
    blocks: List[tuple[Optional[str], List[str]]] = []
    for line in markdown.splitlines():
        if not line.strip():
            continue
        heading = _HEADING_LINE.match(line)
        if heading:
            blocks.append((heading.group(2).strip(), []))
        elif blocks:
            blocks[-1][1].append(line)
        else:
            blocks.append((None, [line]))

    if not blocks:
        return []

    if len(blocks) == 1 and blocks[0][0] is None:
        text = clean_section_text(_bulletize("\n".join(blocks[0][1])))
        return [Section(title=f"{filename} - Document", text=text)] if text else []

    sections = []
    untitled = 0
    for heading, body_lines in blocks:
        if not heading:
            untitled += 1
            heading = f"Section {untitled}"
        body = _bulletize("\n".join(body_lines))
        text = clean_section_text(body or heading)
        if text:
            sections.append(Section(title=f"{filename} - {heading}", text=text))
    return sections


def _bulletize(text: str) -> str:
    return _LIST_MARKER.sub("• ", text).strip()


class DocxExtractor:
    """Class-based wrapper for DOCX extraction, used by IngestionPipeline."""

    def can_process(self, file_path: Path) -> bool:
        return can_process(file_path)

    def extract(self, file_path: Path) -> List[Section]:
        sections = extract_sections(file_path)
        logger.debug("Extracted DOCX sections", file=file_path.name, sections=len(sections))
        return sections
