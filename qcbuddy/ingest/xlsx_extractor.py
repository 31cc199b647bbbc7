"""XLSX extractor - Glossary pairs and tag definitions from workbooks.

Workbooks never become chunks. The filename decides the output:

- a name containing "glossary" yields bilingual pairs per market
- a name containing "cuisine" or "tag" yields tag definitions
- anything else is not recognized and is skipped by the pipeline

Column headers are matched case-insensitively on every sheet.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List
from zipfile import BadZipFile

import pandas as pd

from qcbuddy.core.exceptions import ExtractionError
from qcbuddy.core.logging import get_logger
from qcbuddy.core.models import GlossaryEntry, TagDefinition
from qcbuddy.shared.text_utils import clean_section_text

logger = get_logger(__name__)

Row = Dict[str, str]

_EN_COLUMNS = ("en", "english")
_AR_COLUMNS = ("ar", "arabic")
_MARKET_COLUMNS = ("market", "country")


class WorkbookKind(str, Enum):
    GLOSSARY = "glossary"
    TAGS = "tags"
    UNKNOWN = "unknown"


def can_process(file_path: Path) -> bool:
    """Check if a file is an XLSX workbook."""
    return file_path.suffix.lower() == ".xlsx"


def workbook_kind(file_path: Path) -> WorkbookKind:
    """Route a workbook by filename pattern."""
    name = file_path.name.lower()
    if "glossary" in name:
        return WorkbookKind.GLOSSARY
    if "cuisine" in name or "tag" in name:
        return WorkbookKind.TAGS
    return WorkbookKind.UNKNOWN


def read_rows(file_path: Path) -> List[Row]:
    """
    Read every row of every sheet as a dict keyed by lowercase header.

    Raises:
        ExtractionError: If the workbook cannot be read
    """
    try:
        sheets = pd.read_excel(file_path, sheet_name=None, dtype=str, engine="openpyxl")
    except (BadZipFile, KeyError, ValueError, OSError) as e:
        raise ExtractionError(f"Cannot read workbook {file_path.name}: {e}") from e

    rows: List[Row] = []
    for sheet_name, df in sheets.items():
        df = df.fillna("")
        df.columns = [str(c).strip().lower() for c in df.columns]
        for record in df.to_dict(orient="records"):
            rows.append({k: _cell(v) for k, v in record.items()})
        logger.debug("Read sheet", file=file_path.name, sheet=sheet_name, rows=len(df))
    return rows


def _cell(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return clean_section_text(str(value))


def _first(row: Row, names: tuple[str, ...]) -> str:
    for name in names:
        value = row.get(name, "")
        if value:
            return value
    return ""


def build_glossary(rows: List[Row]) -> Dict[str, List[GlossaryEntry]]:
    """
    Group en/ar pairs by market.

    Rows missing either term are skipped. A row with no market applies to
    both AE and JO; otherwise the market text routes it (it may name both).
    """
    glossary: Dict[str, List[GlossaryEntry]] = {"AE": [], "JO": []}
    for row in rows:
        en = _first(row, _EN_COLUMNS)
        ar = _first(row, _AR_COLUMNS)
        if not en or not ar:
            continue
        entry = GlossaryEntry(en=en, ar=ar)
        market = _first(row, _MARKET_COLUMNS).upper()
        if not market:
            glossary["AE"].append(entry)
            glossary["JO"].append(entry)
            continue
        if "AE" in market:
            glossary["AE"].append(entry)
        if "JO" in market:
            glossary["JO"].append(entry)
    return glossary


def build_tag_definitions(rows: List[Row]) -> Dict[str, List[TagDefinition]]:
    """Split tag rows into cuisine and extra definitions."""
    result: Dict[str, List[TagDefinition]] = {"cuisine": [], "extra": []}
    for row in rows:
        tag = row.get("tag", "")
        if not tag:
            continue
        keywords = [
            k.strip() for k in row.get("keywords", "").lower().split(",") if k.strip()
        ]
        definition = TagDefinition(tag=tag, keywords=keywords)
        if "cuisine" in row.get("type", "").lower():
            result["cuisine"].append(definition)
        else:
            result["extra"].append(definition)
    return result
