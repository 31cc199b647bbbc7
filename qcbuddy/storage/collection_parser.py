"""
Knowledge collection parser.

Collections are authored by hand as well as by the ingestion pipeline, so
a file may hold any of three shapes. Each shape is tried in order and the
first one that validates wins:

    RECORDS       [{"title": ..., "market": ..., "topic": ..., "text"|"body": ...}, ...]
    STRINGS       ["Hero images must be 1125x780.", ...]
    TREE          any other JSON value; string leaves are joined into one chunk

A file that is not valid JSON is UNPARSEABLE. The store logs and skips it.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, List, Optional

from qcbuddy.core.exceptions import CollectionFormatError
from qcbuddy.core.models import KnowledgeChunk, Market, Topic
from qcbuddy.ingest.classifier import detect_topic

TEXT_FIELDS = ("text", "body")

# Filename hints, checked in order, for chunks that carry no topic
_FILENAME_TOPICS = [
    ("company", Topic.COMPANY),
    ("tag", Topic.TAGS),
    ("writing", Topic.WRITING),
    ("image", Topic.IMAGES),
    ("zone", Topic.ZONES),
]


class CollectionShape(str, Enum):
    RECORDS = "records"
    STRINGS = "strings"
    TREE = "tree"
    UNPARSEABLE = "unparseable"


@dataclass
class ParsedCollection:
    """Result of parsing one collection file."""

    filename: str
    shape: CollectionShape
    chunks: List[KnowledgeChunk] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.shape is not CollectionShape.UNPARSEABLE


def guess_topic_from_name(filename: str) -> Topic:
    """Topic hinted by a collection filename (misc when none)."""
    name = filename.lower()
    for hint, topic in _FILENAME_TOPICS:
        if hint in name:
            return topic
    return Topic.MISC


def _record_text(record: dict) -> Optional[str]:
    for name in TEXT_FIELDS:
        value = record.get(name)
        if isinstance(value, str):
            return value
    return None


def _is_records(data: Any) -> bool:
    return isinstance(data, list) and all(
        isinstance(item, dict) and _record_text(item) is not None for item in data
    )


def _is_strings(data: Any) -> bool:
    return isinstance(data, list) and bool(data) and all(isinstance(i, str) for i in data)


def iter_string_leaves(value: Any) -> Iterator[str]:
    """String leaves of a JSON value in traversal order."""
    if isinstance(value, str):
        yield value
    elif isinstance(value, list):
        for item in value:
            yield from iter_string_leaves(item)
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_string_leaves(item)


def parse_records(data: List[dict], filename: str) -> List[KnowledgeChunk]:
    default_topic = guess_topic_from_name(filename)
    chunks = []
    for record in data:
        text = (_record_text(record) or "").strip()
        if not text:
            continue
        topic = Topic.parse(record.get("topic")) or default_topic
        chunks.append(
            KnowledgeChunk(
                title=str(record.get("title") or "").strip() or filename,
                text=text,
                market=Market.parse(record.get("market")),
                topic=topic,
            )
        )
    return chunks


def parse_strings(data: List[str], filename: str) -> List[KnowledgeChunk]:
    name_topic = guess_topic_from_name(filename)
    chunks = []
    for item in data:
        text = item.strip()
        if not text:
            continue
        topic = name_topic if name_topic is not Topic.MISC else detect_topic("", text)
        chunks.append(KnowledgeChunk(title=filename, text=text, market=Market.ALL, topic=topic))
    return chunks


def parse_tree(data: Any, filename: str) -> List[KnowledgeChunk]:
    leaves = [leaf.strip() for leaf in iter_string_leaves(data) if leaf.strip()]
    if not leaves:
        return []
    text = "\n".join(leaves)
    topic = guess_topic_from_name(filename)
    if topic is Topic.MISC:
        topic = detect_topic("", text)
    return [KnowledgeChunk(title=filename, text=text, market=Market.ALL, topic=topic)]


def parse_collection(data: Any, filename: str) -> ParsedCollection:
    """Normalize already-decoded JSON into chunks, trying each shape in order."""
    if _is_records(data):
        return ParsedCollection(filename, CollectionShape.RECORDS, parse_records(data, filename))
    if _is_strings(data):
        return ParsedCollection(filename, CollectionShape.STRINGS, parse_strings(data, filename))
    return ParsedCollection(filename, CollectionShape.TREE, parse_tree(data, filename))


def load_json(path: Path) -> Any:
    """
    Decode a JSON file.

    Raises:
        CollectionFormatError: If the file cannot be read or decoded
    """
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CollectionFormatError(f"Cannot parse {path.name}: {e}") from e


def read_collection(path: Path) -> ParsedCollection:
    """Read and parse one collection file; never raises for bad content."""
    try:
        data = load_json(path)
    except CollectionFormatError as e:
        return ParsedCollection(path.name, CollectionShape.UNPARSEABLE, error=str(e))
    return parse_collection(data, path.name)
