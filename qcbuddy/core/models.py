"""
Domain models shared across ingestion, storage and retrieval.

Section is produced transiently by the extractors; KnowledgeChunk is the
persisted unit of retrieval; RankedChunk is recomputed for every query.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Market(str, Enum):
    """Regional policy scope of a chunk."""

    AE = "AE"
    JO = "JO"
    SA = "SA"
    ALL = "ALL"  # Market-agnostic

    @classmethod
    def parse(cls, value: Any) -> "Market":
        """Parse a loosely-authored market value; unknown values mean ALL."""
        if isinstance(value, Market):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return cls.ALL


class MarketPreference(str, Enum):
    """Market requested by the asker."""

    AUTO = "AUTO"
    AE = "AE"
    JO = "JO"
    SA = "SA"

    @classmethod
    def parse(cls, value: Any) -> "MarketPreference":
        """Parse a request market value; unknown values mean AUTO."""
        if isinstance(value, MarketPreference):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls(text)
        except ValueError:
            return cls.AUTO


class Topic(str, Enum):
    """Coarse subject label for chunks and queries."""

    COMPANY = "company"
    TAGS = "tags"
    WRITING = "writing"
    IMAGES = "images"
    ZONES = "zones"
    MISC = "misc"

    @classmethod
    def parse(cls, value: Any) -> Optional["Topic"]:
        """Parse a topic value; None when it is not a known label."""
        if isinstance(value, Topic):
            return value
        text = str(value or "").strip().lower()
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass
class Section:
    """An ordered unit of extracted document content."""

    title: str
    text: str


@dataclass
class KnowledgeChunk:
    """One classified, size-bounded fragment of policy text."""

    title: str
    text: str
    market: Market = Market.ALL
    topic: Topic = Topic.MISC

    def to_dict(self) -> Dict[str, str]:
        """Persisted record shape: title, market, topic, text."""
        return {
            "title": self.title,
            "market": self.market.value,
            "topic": self.topic.value,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KnowledgeChunk":
        """Create a chunk from a persisted record, filling defaults."""
        return cls(
            title=str(data.get("title") or ""),
            text=str(data.get("text") or ""),
            market=Market.parse(data.get("market")),
            topic=Topic.parse(data.get("topic")) or Topic.MISC,
        )


@dataclass
class GlossaryEntry:
    """Bilingual term pair."""

    en: str
    ar: str

    def to_dict(self) -> Dict[str, str]:
        return {"en": self.en, "ar": self.ar}


@dataclass
class TagDefinition:
    """A cuisine or extra tag with its trigger keywords."""

    tag: str
    keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"tag": self.tag, "keywords": list(self.keywords)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagDefinition":
        keywords = data.get("keywords") or []
        if isinstance(keywords, str):
            keywords = keywords.split(",")
        return cls(
            tag=str(data.get("tag") or "").strip(),
            keywords=[str(k).strip().lower() for k in keywords if str(k).strip()],
        )


@dataclass
class Query:
    """A single question with its market preference."""

    question: str
    market: MarketPreference = MarketPreference.AUTO


@dataclass
class RankedChunk:
    """A chunk with its score for one query.

    Attributes:
        chunk: The scored chunk
        score: Total score used for ordering
        relevance: Evidence the chunk answers the query (keyword hits, a
            non-misc topic match, close lexical similarity), used for the
            answer threshold
    """

    chunk: KnowledgeChunk
    score: float
    relevance: float = 0.0
