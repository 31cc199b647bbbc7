"""PPTX extractor - One bulleted section per slide."""

from pathlib import Path
from typing import Any, List
from zipfile import BadZipFile

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.exc import PackageNotFoundError

from qcbuddy.core.exceptions import ExtractionError
from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import Section
from qcbuddy.shared.text_utils import clean_section_text, normalize_whitespace

logger = get_logger(__name__)


def can_process(file_path: Path) -> bool:
    """Check if a file is a PPTX file."""
    return file_path.suffix.lower() == ".pptx"


def extract_sections(file_path: Path) -> List[Section]:
    """
    Extract one section per slide, in slide order.

    Every text paragraph, table cell and grouped shape on a slide becomes
    one ``•``-prefixed line. Slides without text are dropped.

    Raises:
        ExtractionError: If the file is not a readable presentation
    """
    try:
        prs = Presentation(str(file_path))
    except (PackageNotFoundError, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ExtractionError(f"Cannot open {file_path.name}: {e}") from e

    sections = []
    for slide_num, slide in enumerate(prs.slides, 1):
        lines: List[str] = []
        for shape in slide.shapes:
            _collect_shape_lines(shape, lines)

        text = clean_section_text(as_bullets(lines))
        if text:
            sections.append(
                Section(title=f"{file_path.name} - Slide {slide_num}", text=text)
            )
    return sections


def _collect_shape_lines(shape: Any, lines: List[str]) -> None:
    """Append text lines from a shape, descending into groups."""
    if shape.shape_type == MSO_SHAPE_TYPE.GROUP:
        for child in shape.shapes:
            _collect_shape_lines(child, lines)
        return

    if getattr(shape, "has_text_frame", False) and shape.has_text_frame:
        for paragraph in shape.text_frame.paragraphs:
            text = normalize_whitespace(paragraph.text)
            if text:
                lines.append(text)

    if getattr(shape, "has_table", False) and shape.has_table:
        for row in shape.table.rows:
            for cell in row.cells:
                text = normalize_whitespace(cell.text)
                if text:
                    lines.append(text)


def as_bullets(lines: List[str]) -> str:
    """Prefix each line with a bullet unless it already has one."""
    return "\n".join(
        line if line.startswith(("•", "-")) else f"• {line}" for line in lines
    )


class PptxExtractor:
    """Class-based wrapper for PPTX extraction, used by IngestionPipeline."""

    def can_process(self, file_path: Path) -> bool:
        return can_process(file_path)

    def extract(self, file_path: Path) -> List[Section]:
        sections = extract_sections(file_path)
        logger.debug("Extracted PPTX slides", file=file_path.name, sections=len(sections))
        return sections
