"""
Fragment heuristics for loaded knowledge.

Headings and slide titles carry no policy on their own, so they are
dropped. Among what remains, "rule-like" sentences are preferred: long
enough, terminated, and mentioning an imperative or a domain keyword.
"""

import re
from typing import List

from qcbuddy.core.models import KnowledgeChunk
from qcbuddy.shared.text_utils import strip_meta_refs

HEADING_MAX_CHARS = 35
HEADING_MAX_WORDS = 4
RULE_MIN_CHARS = 40

_TITLE_CASE = re.compile(r"^[A-Z][A-Za-z0-9]+(?:\s+[A-Z][A-Za-z0-9]+)*$")
_BARE_BULLET = re.compile(r"^[*•-]\s*$")
_LEADING_BULLET = re.compile(r"^\s*[*•-]\s*")
_TERMINAL = re.compile(r"[.!?]$")
_RULE_KEYWORDS = re.compile(
    r"\b(?:must|should|required|don[’']t|do not|avoid|use|set|add|choose|is|are"
    r"|dimensions?|size|cr|tl|vat|tax|tags?|uae|ae|jo|ksa)\b|1200|1125|780",
    re.IGNORECASE,
)


def clean_fragment(text: str) -> str:
    """Strip bullet markers per line and document-location references."""
    lines = []
    for line in text.splitlines():
        cleaned = strip_meta_refs(_LEADING_BULLET.sub("", line))
        if cleaned:
            lines.append(cleaned)
    return "\n".join(lines)


def is_heading_like(text: str) -> bool:
    t = text.strip()
    if not t:
        return True
    return (
        len(t) < HEADING_MAX_CHARS
        or len(t.split()) <= HEADING_MAX_WORDS
        or _TITLE_CASE.match(t) is not None
        or _BARE_BULLET.match(t) is not None
    )


def is_rule_like(text: str) -> bool:
    t = text.strip()
    if len(t) < RULE_MIN_CHARS:
        return False
    if not _TERMINAL.search(t):
        return False
    return _RULE_KEYWORDS.search(t) is not None


def filter_fragments(chunks: List[KnowledgeChunk], prefer_rule_like: bool = True) -> List[KnowledgeChunk]:
    """
    Clean one file's chunks, drop headings, then prefer rule-like text.

    When no rule-like chunk survives, the cleaned non-heading chunks are
    kept so that a file's content is never dropped entirely.
    """
    kept = []
    for chunk in chunks:
        text = clean_fragment(chunk.text)
        if is_heading_like(text):
            continue
        kept.append(KnowledgeChunk(title=chunk.title, text=text, market=chunk.market, topic=chunk.topic))

    if not prefer_rule_like:
        return kept
    rules = [c for c in kept if is_rule_like(c.text)]
    return rules or kept
